"""Flask web front end for the catalog converter.

Routes:
    GET  /                -- Upload form
    POST /info            -- Catalog header report
    POST /preview         -- First rows of the converted catalog
    POST /download/csv    -- CSV file download
    POST /download/header -- C header file download
"""
from dataclasses import replace
from pathlib import Path

from flask import Flask, render_template, request, Response
from werkzeug.utils import secure_filename

from starcat.catalog import ReadOptions, check_header, load_catalog
from starcat.coords import sexagesimal
from starcat.decoder import ByteOrder
from starcat.errors import CatalogError
from starcat.header import Epoch
from starcat.output import (
    OutputConfig, OutputFormat, SortKey,
    format_info, render, sort_stars,
)

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 64 * 1024 * 1024

PREVIEW_ROWS = 50

BYTE_ORDERS = {"auto": None, "little": ByteOrder.LITTLE, "big": ByteOrder.BIG}
EPOCHS = {"auto": None, "J2000": Epoch.J2000, "B1950": Epoch.B1950}
SORT_KEYS = {key.value: key for key in SortKey}

Upload = tuple[bytes, str, ReadOptions, OutputConfig]


def _optional(name: str, convert):
    value = request.form.get(name, "").strip()
    return convert(value) if value else None


def _parse_form() -> Upload | str:
    """Parse the upload form. Returns tuple on success, error string on failure.

    Validates:
        - catalog: a non-empty uploaded file
        - byte_order: auto, little or big
        - epoch: auto, J2000 or B1950
        - magnitude_index: optional integer >= 0
        - max_magnitude: optional float
        - sort: index, magnitude or right_ascension
    """
    upload = request.files.get("catalog")
    if upload is None or not upload.filename:
        return "Choose a catalog file to upload."
    data = upload.read()
    source = Path(secure_filename(upload.filename) or "catalog").stem

    try:
        byte_order = BYTE_ORDERS[request.form.get("byte_order", "auto")]
        epoch = EPOCHS[request.form.get("epoch", "auto")]
        sort = SORT_KEYS[request.form.get("sort", SortKey.INDEX.value)]
    except KeyError as e:
        return f"Unknown option: {e.args[0]}"

    try:
        magnitude_index = _optional("magnitude_index", int)
        if magnitude_index is not None and magnitude_index < 0:
            return "Magnitude column must be 0 or more."
    except ValueError:
        return "Invalid magnitude column. Enter a whole number like 0."

    try:
        max_magnitude = _optional("max_magnitude", float)
    except ValueError:
        return "Invalid magnitude limit. Enter a number like 6.5."

    options = ReadOptions(
        byte_order=byte_order,
        epoch=epoch,
        magnitude_index=magnitude_index,
        max_magnitude=max_magnitude,
    )
    config = OutputConfig(
        sort=sort,
        single_precision=request.form.get("single") == "on",
        include_name=request.form.get("names") == "on",
        include_type=request.form.get("types") == "on",
    )
    return (data, source, options, config)


def _page(**context) -> str:
    context.setdefault("info", None)
    context.setdefault("rows", None)
    context.setdefault("error", None)
    return render_template("index.html", sort_keys=list(SORT_KEYS), **context)


@app.route("/")
def index() -> str:
    """Render the upload form."""
    return _page(form_data={})


@app.route("/info", methods=["POST"])
def info() -> str:
    """Show the catalog header report without decoding records."""
    form_data = request.form.to_dict()
    result = _parse_form()
    if isinstance(result, str):
        return _page(form_data=form_data, error=result)
    data, source, options, _ = result
    try:
        header = check_header(data, options)
    except CatalogError as e:
        return _page(form_data=form_data, error=f"{source}: {e}")
    return _page(form_data=form_data, info=format_info(header))


@app.route("/preview", methods=["POST"])
def preview() -> str:
    """Decode the catalog and show its first rows."""
    form_data = request.form.to_dict()
    result = _parse_form()
    if isinstance(result, str):
        return _page(form_data=form_data, error=result)
    data, source, options, config = result
    try:
        catalog = load_catalog(data, options, source=source)
    except CatalogError as e:
        return _page(form_data=form_data, error=f"{source}: {e}")

    stars = sort_stars(catalog.stars, config.sort)[:PREVIEW_ROWS]
    coords = sexagesimal(stars, catalog.header.epoch)
    rows = [
        {
            "index": s.index,
            "name": s.name,
            "position": pos,
            "magnitude": f"{s.magnitude:.2f}",
            "type": s.spectral_type.replace("\0", ""),
        }
        for s, pos in zip(stars, coords)
    ]
    return _page(form_data=form_data, info=format_info(catalog.header), rows=rows,
                 total=len(catalog.stars), skipped=catalog.skipped)


def _download(output_format: OutputFormat, suffix: str, mimetype: str) -> Response:
    result = _parse_form()
    if isinstance(result, str):
        return Response(result, status=400, mimetype="text/plain")
    data, source, options, config = result
    try:
        catalog = load_catalog(data, options, source=source)
    except CatalogError as e:
        return Response(f"{source}: {e}", status=400, mimetype="text/plain")
    body = render(catalog, source, replace(config, format=output_format))
    return Response(body, mimetype=mimetype,
                    headers={"Content-Disposition": f"attachment; filename={source}{suffix}"})


@app.route("/download/csv", methods=["POST"])
def download_csv() -> Response:
    """Convert and download the catalog as CSV."""
    return _download(OutputFormat.CSV, ".csv", "text/csv")


@app.route("/download/header", methods=["POST"])
def download_header() -> Response:
    """Convert and download the catalog as a C header."""
    return _download(OutputFormat.C_HEADER, ".h", "text/x-c")


if __name__ == "__main__":
    app.run(debug=True, port=5000)
