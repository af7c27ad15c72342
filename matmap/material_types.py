# FILE: matmap/material_types.py

import math
import numpy as np

# Order of the values in one material cell, also the order on the wire
PROPERTY_NAMES = ("thickness", "X0", "L0", "A", "Z", "rho")
N_PROPERTIES = len(PROPERTY_NAMES)

# --- Binning strategies ---
EQUIDISTANT = "equidistant"
ARBITRARY = "arbitrary"
BIN_STRATEGIES = (EQUIDISTANT, ARBITRARY)

# --- Material descriptor kinds ---
PROTO = "proto"
HOMOGENEOUS = "homogeneous"
BINNED_1D = "binned1d"
BINNED_2D = "binned2d"
MATERIAL_KINDS = (PROTO, HOMOGENEOUS, BINNED_1D, BINNED_2D)


class MaterialProperties:
    """
    Material of one cell: thickness, radiation length X0, nuclear interaction
    length L0, atomic mass A, atomic number Z and density rho. Values are
    taken as given, no unit conversion happens here. A cell with all values
    at zero is vacuum.
    """
    def __init__(self, thickness=0.0, X0=0.0, L0=0.0, A=0.0, Z=0.0, rho=0.0):
        self.thickness = float(thickness)
        self.X0 = float(X0)
        self.L0 = float(L0)
        self.A = float(A)
        self.Z = float(Z)
        self.rho = float(rho)

    @classmethod
    def from_list(cls, values):
        values = list(values)
        if not values:
            return cls()
        if len(values) != N_PROPERTIES:
            raise ValueError(f"Expected {N_PROPERTIES} material values, got {len(values)}")
        return cls(*values)

    def to_list(self):
        return [self.thickness, self.X0, self.L0, self.A, self.Z, self.rho]

    def is_vacuum(self):
        return not any(self.to_list())

    def __eq__(self, other):
        if not isinstance(other, MaterialProperties):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self):
        vals = ", ".join(f"{name}={val:g}" for name, val in zip(PROPERTY_NAMES, self.to_list()))
        return f"MaterialProperties({vals})"


class BinAxis:
    """
    Maps a continuous coordinate range onto `bins` discrete bins, either with
    equal widths between `min` and `max` or with explicit `boundaries`.
    """
    def __init__(self, strategy, bins, min=None, max=None, boundaries=None):
        if strategy not in BIN_STRATEGIES:
            raise ValueError(f"Unknown binning strategy '{strategy}'")
        bins = int(bins)
        if bins < 1:
            raise ValueError(f"Bin count must be positive, got {bins}")
        self.strategy = strategy
        self.bins = bins

        if strategy == EQUIDISTANT:
            if min is None or max is None:
                raise ValueError("Equidistant binning needs both min and max")
            self.min, self.max = float(min), float(max)
            if not (math.isfinite(self.min) and math.isfinite(self.max)) or self.min >= self.max:
                raise ValueError(f"Invalid equidistant range [{min}, {max}]")
            self.boundaries = None
        else:
            boundaries = [float(b) for b in (boundaries or [])]
            if len(boundaries) != bins + 1:
                raise ValueError(f"Arbitrary binning with {bins} bins needs {bins + 1} boundaries, got {len(boundaries)}")
            if any(lo >= hi for lo, hi in zip(boundaries, boundaries[1:])):
                raise ValueError("Bin boundaries must be strictly increasing")
            self.boundaries = boundaries
            self.min, self.max = boundaries[0], boundaries[-1]

    @classmethod
    def equidistant(cls, bins, min, max):
        return cls(EQUIDISTANT, bins, min=min, max=max)

    @classmethod
    def arbitrary(cls, boundaries):
        return cls(ARBITRARY, len(boundaries) - 1, boundaries=boundaries)

    def __eq__(self, other):
        if not isinstance(other, BinAxis):
            return NotImplemented
        return (self.strategy == other.strategy and self.bins == other.bins
                and self.min == other.min and self.max == other.max
                and self.boundaries == other.boundaries)

    def __repr__(self):
        if self.strategy == EQUIDISTANT:
            return f"BinAxis({self.strategy}, {self.bins}, [{self.min:g}, {self.max:g}])"
        return f"BinAxis({self.strategy}, {self.bins}, {self.boundaries})"


class MaterialDescriptor:
    """
    Surface or volume material as a tagged variant.

    - `proto`: placeholder marking a material-mapping target; no cell data,
      optionally the intended binning in `axes`.
    - `homogeneous`: a single cell, no axes.
    - `binned1d` / `binned2d`: a grid of cells over one or two bin axes.

    Cells live in `data`, a float array of shape (rows, cols, 6) where
    cols runs along axes[0] and rows along axes[1].
    """
    def __init__(self, kind, axes=None, data=None):
        if kind not in MATERIAL_KINDS:
            raise ValueError(f"Unknown material kind '{kind}'")
        self.kind = kind
        self.axes = tuple(axes) if axes else ()
        self.data = data

    @classmethod
    def proto(cls, axes=None):
        return cls(PROTO, axes=axes)

    @classmethod
    def homogeneous(cls, properties):
        if not isinstance(properties, MaterialProperties):
            properties = MaterialProperties.from_list(properties)
        data = np.array([[properties.to_list()]], dtype=float)
        return cls(HOMOGENEOUS, data=data)

    @classmethod
    def binned(cls, axes, matrix):
        """
        Builds a binned descriptor. `matrix` is indexed [bin1][bin0] and holds
        either MaterialProperties or lists of six values per cell.
        """
        axes = tuple(axes)
        if len(axes) not in (1, 2):
            raise ValueError(f"Binned material needs one or two axes, got {len(axes)}")
        expected = (axes[1].bins if len(axes) == 2 else 1, axes[0].bins)

        rows = [[cell.to_list() if isinstance(cell, MaterialProperties) else
                 (list(cell) or [0.0] * N_PROPERTIES) for cell in row] for row in matrix]
        data = np.array(rows, dtype=float)
        if data.shape != expected + (N_PROPERTIES,):
            raise ValueError(f"Material matrix of shape {data.shape[:2]} does not match binning {expected}")
        return cls(BINNED_1D if len(axes) == 1 else BINNED_2D, axes=axes, data=data)

    @property
    def shape(self):
        """(rows, cols) of the cell grid; (0, 0) for a proto material."""
        if self.data is None:
            return (0, 0)
        return self.data.shape[:2]

    @property
    def bins(self):
        if self.kind == PROTO:
            return int(np.prod([axis.bins for axis in self.axes])) if self.axes else 0
        rows, cols = self.shape
        return rows * cols

    def properties(self, bin0=0, bin1=0):
        if self.data is None:
            raise ValueError("Proto material carries no material properties")
        return MaterialProperties(*self.data[bin1, bin0])

    def cells(self):
        """Yields all cells with the first axis varying fastest."""
        if self.data is None:
            return
        for row in self.data:
            for cell in row:
                yield MaterialProperties(*cell)

    def __eq__(self, other):
        if not isinstance(other, MaterialDescriptor):
            return NotImplemented
        if self.kind != other.kind or self.axes != other.axes:
            return False
        if self.data is None or other.data is None:
            return self.data is None and other.data is None
        return self.data.shape == other.data.shape and np.array_equal(self.data, other.data)

    __hash__ = None

    def __repr__(self):
        return f"MaterialDescriptor({self.kind}, axes={list(self.axes)}, shape={self.shape})"
