"""Catalog positions as astropy coordinates.

Catalog coordinates are radians in the catalog's own epoch: FK5 for J2000,
FK4 for B1950.
"""
from typing import Sequence

import numpy as np
from numpy.typing import NDArray
from astropy.coordinates import FK4, FK5, BaseCoordinateFrame, SkyCoord
import astropy.units as u

from starcat.header import Epoch
from starcat.record import StarRecord


def catalog_frame(epoch: Epoch) -> BaseCoordinateFrame:
    """Reference frame matching a catalog epoch."""
    if epoch is Epoch.J2000:
        return FK5(equinox="J2000")
    return FK4(equinox="B1950")


def positions(stars: Sequence[StarRecord]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """RA and Dec arrays (radians) of `stars`."""
    ra = np.array([s.right_ascension for s in stars], dtype=np.float64)
    dec = np.array([s.declination for s in stars], dtype=np.float64)
    return ra, dec


def to_skycoord(stars: Sequence[StarRecord], epoch: Epoch) -> SkyCoord:
    """Bulk-convert stars to one SkyCoord. Call once per catalog, not per star."""
    ra, dec = positions(stars)
    return SkyCoord(ra=ra * u.rad, dec=dec * u.rad, frame=catalog_frame(epoch))


def sexagesimal(stars: Sequence[StarRecord], epoch: Epoch, precision: int = 1) -> list[str]:
    """'hh:mm:ss.s +dd:mm:ss.s' strings for `stars`."""
    if not stars:
        return []
    coords = to_skycoord(stars, epoch)
    return list(coords.to_string("hmsdms", sep=":", precision=precision))
