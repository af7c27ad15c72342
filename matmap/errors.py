# matmap/errors.py

class MaterialMapError(ValueError):
    """Base class for failures while converting material maps."""


class MalformedInput(MaterialMapError):
    """The document violates the material map schema."""


class UnsupportedBinType(MalformedInput):
    """A bin-axis descriptor names a binning strategy that is not known."""
    def __init__(self, strategy):
        super().__init__(f"Unsupported binning strategy '{strategy}'")
        self.strategy = strategy


class GeometryIdCollision(MaterialMapError):
    """Two entries of one document decode to the same GeometryID."""
    def __init__(self, geo_id, first_path, second_path):
        super().__init__(
            f"GeometryID {geo_id!r} is claimed by both '{first_path}' and '{second_path}'"
        )
        self.geo_id = geo_id
        self.first_path = first_path
        self.second_path = second_path
