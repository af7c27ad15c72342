# matmap/material_codec.py
import logging
import math
import numbers

from .errors import MalformedInput, UnsupportedBinType
from .material_types import (
    MaterialDescriptor, MaterialProperties, BinAxis,
    PROTO, EQUIDISTANT, ARBITRARY, BIN_STRATEGIES, N_PROPERTIES
)

# Values of the type field on the wire
TYPE_PROTO = "proto"
TYPE_DATA = "data"


def _is_number(value):
    """True for finite real numbers; bools and integers too large for a float are rejected."""
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


class MaterialCodec:
    """
    Converts one MaterialDescriptor to and from its JSON fragment.

    A fragment holds a type discriminator ("proto" or "data"), one bin-axis
    descriptor per active dimension and, for "data", a flat array of cell
    rows [thickness, X0, L0, A, Z, rho] with the first axis varying fastest.
    """
    def __init__(self, config, logger=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    # --- Encoding ---

    def to_json(self, material, geo_id=None):
        if not isinstance(material, MaterialDescriptor):
            raise TypeError(f"Expected a MaterialDescriptor, got {type(material).__name__}")
        cfg = self.config
        mj = {}
        if geo_id is not None:
            mj[cfg.geoid_key] = str(int(geo_id))
        if not cfg.write_data:
            # Identifier-only entry
            return mj

        if material.kind == PROTO:
            mj[cfg.type_key] = TYPE_PROTO
        else:
            mj[cfg.type_key] = TYPE_DATA

        for key, axis in zip((cfg.bin0_key, cfg.bin1_key), material.axes):
            mj[key] = self.axis_to_json(axis)

        if material.kind != PROTO:
            mj[cfg.data_key] = [
                [] if cell.is_vacuum() else cell.to_list() for cell in material.cells()
            ]
        return mj

    def axis_to_json(self, axis):
        if axis.strategy == EQUIDISTANT:
            return [axis.strategy, axis.bins, axis.min, axis.max]
        return [axis.strategy, axis.bins, list(axis.boundaries)]

    # --- Decoding ---

    def from_json(self, mj, path=""):
        """
        Returns the decoded MaterialDescriptor, or None for a structural
        entry that carries no type (e.g. an identifier-only entry).
        """
        cfg = self.config
        if not isinstance(mj, dict):
            raise MalformedInput(f"Material entry at '{path}' must be an object, got {type(mj).__name__}")

        if cfg.type_key not in mj:
            if cfg.data_key in mj:
                raise MalformedInput(f"Material entry at '{path}' has data but no '{cfg.type_key}'")
            self.logger.debug(f"j2a: entry at '{path}' has no material payload, skipped")
            return None

        mtype = mj[cfg.type_key]
        if mtype not in (TYPE_PROTO, TYPE_DATA):
            raise MalformedInput(f"Unrecognized material type {mtype!r} at '{path}'")

        axes = self.axes_from_json(mj, path)
        if mtype == TYPE_PROTO:
            return MaterialDescriptor.proto(axes)

        rows = axes[1].bins if len(axes) > 1 else 1
        cols = axes[0].bins if axes else 1
        matrix = self.matrix_from_json(mj.get(cfg.data_key), rows, cols, path)

        if not axes:
            return MaterialDescriptor.homogeneous(matrix[0][0])
        return MaterialDescriptor.binned(axes, matrix)

    def axes_from_json(self, mj, path=""):
        cfg = self.config
        axes = []
        for key in (cfg.bin0_key, cfg.bin1_key):
            bin_json = mj.get(key)
            if bin_json is None or bin_json == []:
                continue
            if key == cfg.bin1_key and not axes:
                raise MalformedInput(f"'{cfg.bin1_key}' given without '{cfg.bin0_key}' at '{path}'")
            axes.append(self.axis_from_json(bin_json, f"{path}/{key}"))
        return axes

    def axis_from_json(self, bin_json, path=""):
        if not isinstance(bin_json, list) or len(bin_json) < 3:
            raise MalformedInput(f"Bin descriptor at '{path}' must be a list [strategy, bins, bounds...]")

        strategy, bins = bin_json[0], bin_json[1]
        if strategy not in BIN_STRATEGIES:
            raise UnsupportedBinType(strategy)
        if not _is_number(bins) or not float(bins).is_integer():
            raise MalformedInput(f"Bin count {bins!r} at '{path}' is not an integer")

        try:
            if strategy == EQUIDISTANT:
                if len(bin_json) != 4 or not all(_is_number(v) for v in bin_json[2:]):
                    raise MalformedInput(f"Equidistant bin descriptor at '{path}' must be [strategy, bins, min, max]")
                return BinAxis(EQUIDISTANT, int(bins), min=bin_json[2], max=bin_json[3])

            boundaries = bin_json[2]
            if len(bin_json) != 3 or not isinstance(boundaries, list) or not all(_is_number(v) for v in boundaries):
                raise MalformedInput(f"Arbitrary bin descriptor at '{path}' must be [strategy, bins, [boundaries]]")
            return BinAxis(ARBITRARY, int(bins), boundaries=boundaries)
        except MalformedInput:
            raise
        except (ValueError, OverflowError) as e:
            raise MalformedInput(f"Invalid bin descriptor at '{path}': {e}") from e

    def matrix_from_json(self, data, rows, cols, path=""):
        """
        Reads the data array into a rows x cols matrix of MaterialProperties.
        Accepts the flat cell list as well as an already nested [row][col] array.
        """
        if not isinstance(data, list) or not data:
            raise MalformedInput(f"Material entry at '{path}' has no '{self.config.data_key}' array")

        nested = isinstance(data[0], list) and bool(data[0]) and isinstance(data[0][0], list)
        if nested:
            if len(data) != rows or any(not isinstance(row, list) or len(row) != cols for row in data):
                raise MalformedInput(
                    f"Material matrix at '{path}' does not have the {rows} x {cols} shape given by its binning"
                )
            cells = [cell for row in data for cell in row]
        else:
            cells = data
            if len(cells) != rows * cols:
                raise MalformedInput(
                    f"Material data at '{path}' has {len(cells)} cell(s), binning expects {rows} x {cols}"
                )

        properties = [self.cell_from_json(cell, path) for cell in cells]
        return [properties[r * cols:(r + 1) * cols] for r in range(rows)]

    def cell_from_json(self, cell, path=""):
        if not isinstance(cell, list):
            raise MalformedInput(f"Material cell at '{path}' must be a list, got {type(cell).__name__}")
        if not cell:
            return MaterialProperties()
        if len(cell) != N_PROPERTIES or not all(_is_number(v) for v in cell):
            raise MalformedInput(
                f"Material cell at '{path}' must hold {N_PROPERTIES} numbers (thickness, X0, L0, A, Z, rho), got {cell!r}"
            )
        return MaterialProperties(*cell)
