"""Sort decoded stars and write them out as CSV text or a C header.

Output: CSV lines, a C header with a static star table, or a short report
of the catalog header. Everything that changes the output travels in an
OutputConfig.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from starcat.catalog import Catalog
from starcat.header import Header, ProperMotionKind, StarIdKind
from starcat.record import StarRecord

IMPLEMENTATION_MACRO = "STARCAT_IMPLEMENTATION"

ID_LABELS = {
    StarIdKind.UNKNOWN: "UNKNOWN",
    StarIdKind.NONE: "No",
    StarIdKind.CATALOG: "Catalog star id",
    StarIdKind.GSC: "GSC star id",
    StarIdKind.TYCHO: "Tycho star id",
    StarIdKind.INTEGER: "Integer star id",
}
PROPER_MOTION_LABELS = {
    ProperMotionKind.UNKNOWN: "UNKNOWN",
    ProperMotionKind.NONE: "No",
    ProperMotionKind.PROPER_MOTION: "Yes",
    ProperMotionKind.RADIAL_VELOCITY: "Radial velocity",
}


class OutputFormat(Enum):
    CSV = "csv"
    C_HEADER = "c"


class SortKey(Enum):
    INDEX = "index"
    MAGNITUDE = "magnitude"              # brightest first
    RIGHT_ASCENSION = "right_ascension"  # increasing


@dataclass(frozen=True)
class OutputConfig:
    format: OutputFormat = OutputFormat.CSV
    sort: SortKey = SortKey.INDEX
    single_precision: bool = False
    include_name: bool = False
    include_type: bool = False

    @property
    def precision(self) -> int:
        return 9 if self.single_precision else 17


def sort_stars(stars: Iterable[StarRecord], key: SortKey = SortKey.INDEX) -> list[StarRecord]:
    """Stable sort; equal keys keep their catalog order."""
    if key is SortKey.MAGNITUDE:
        return sorted(stars, key=lambda s: s.magnitude)
    if key is SortKey.RIGHT_ASCENSION:
        return sorted(stars, key=lambda s: s.right_ascension)
    return sorted(stars, key=lambda s: s.index)


def c_identifier(source: str) -> str:
    """C identifier derived from a file name: 'data/BSC5' -> 'data_bsc5'."""
    chars = []
    for i, c in enumerate(source.lower()):
        if i == 0:
            chars.append(c if c.isascii() and c.isalpha() else "x")
        else:
            chars.append(c if c.isascii() and c.isalnum() else "_")
    return "".join(chars) or "x"


def _c_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _spectral(star: StarRecord) -> str:
    return star.spectral_type.replace("\0", "")


def format_csv_row(star: StarRecord, config: OutputConfig) -> str:
    p = config.precision
    fields = []
    if config.include_name:
        fields.append(star.name)
    fields.append(f"{star.right_ascension:.{p}f}")
    fields.append(f"{star.declination:.{p}f}")
    fields.append(f"{star.magnitude:.{p}f}")
    if config.include_type:
        fields.append(_spectral(star))
    return ",".join(fields)


def format_csv(stars: Iterable[StarRecord], config: OutputConfig) -> str:
    return "".join(format_csv_row(s, config) + "\n" for s in stars)


def format_c_row(star: StarRecord, config: OutputConfig) -> str:
    p = config.precision
    row = f"\n\t{{ {star.right_ascension: .{p}f}, {star.declination: .{p}f}, {star.magnitude: .{p}f}"
    if config.include_name:
        row += f", {_c_string(star.name)}"
    if config.include_type:
        row += f", {_c_string(_spectral(star))}"
    return row + " }"


def format_c_header(
    stars: list[StarRecord],
    header: Header,
    source: str,
    config: OutputConfig,
) -> str:
    """C header declaring `struct Star` and a table of `stars`.

    The table definition is only compiled where IMPLEMENTATION_MACRO is
    defined, so the header can be included from several translation units.
    """
    var = c_identifier(source)
    ctype = "float" if config.single_precision else "double"
    epoch = header.epoch.value
    n = len(stars)

    parts: list[str] = []
    parts.append(
        "/*\n"
        f" * Auto-generated from catalog {source} by the starcat program\n"
        " *\n"
        " * Do this:\n"
        f" *   #define {IMPLEMENTATION_MACRO}\n"
        " * before you include this file in *one* C or C++ file to create the implementation\n"
        " *\n"
        " */\n\n"
    )
    parts.append(f"#ifndef {var}_h\n#define {var}_h\n\n")
    parts.append('#ifdef __cplusplus\nextern "C" {\n#endif\n\n')

    parts.append("struct Star {\n")
    parts.append(f"\t{ctype} rightAscension;\t/* radians, {epoch} */\n")
    parts.append(f"\t{ctype} declination;\t/* radians, {epoch} */\n")
    parts.append(f"\t{ctype} magnitude;\n")
    if config.include_name:
        parts.append("\tconst char *name;\n")
    if config.include_type:
        parts.append("\tconst char *type;\n")
    parts.append("};\n\n")

    parts.append(f"enum {{ {var}_num_stars = {n} }};\n\n")
    parts.append(
        f"#ifndef {IMPLEMENTATION_MACRO}\n"
        f"extern const struct Star {var}_stars[{n}];\n"
        "#else\n"
        f"const struct Star {var}_stars[{n}] = {{"
    )
    parts.append(", ".join(format_c_row(s, config) for s in stars))
    parts.append(
        "\n};\n\n"
        "#endif\n\n"
        "#ifdef __cplusplus\n"
        "}\n"
        "#endif\n\n"
        "#endif\n"
    )
    return "".join(parts)


def format_info(header: Header) -> str:
    """Human-readable summary of a catalog header."""
    return (
        "Catalog information:\n"
        f" Number of stars: {header.star_count}\n"
        f" Id: {ID_LABELS[header.star_id]}\n"
        f" Names: {'Yes' if header.has_names else 'No'}\n"
        f" Proper motion: {PROPER_MOTION_LABELS[header.proper_motion]}\n"
        f" Number of magnitudes: {header.magnitude_count}\n"
        f" Epoch: {header.epoch.value}\n"
        f" Bytes per star: {header.bytes_per_record}\n"
        f" Byte order: {header.byte_order.label}\n"
    )


def render(catalog: Catalog, source: str, config: OutputConfig) -> str:
    """Sort and format a catalog's stars according to `config`.

    Names are dropped when the catalog carries none.
    """
    if not catalog.header.has_names:
        config = replace(config, include_name=False)
    stars = sort_stars(catalog.stars, config.sort)
    if config.format is OutputFormat.C_HEADER:
        return format_c_header(stars, catalog.header, source, config)
    return format_csv(stars, config)
