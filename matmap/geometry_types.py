# FILE: matmap/geometry_types.py

# --- GeometryID packing contract ---
# One 64-bit word, five fields. Each field value is stored shifted by the
# number of trailing zero bits of its mask.
VOLUME_MASK = 0xff00000000000000     # 255 volumes
BOUNDARY_MASK = 0x00ff000000000000   # 255 boundaries
LAYER_MASK = 0x0000fff000000000      # 4095 layers
APPROACH_MASK = 0x0000000ff0000000   # 255 approach surfaces
SENSITIVE_MASK = 0x000000000fffffff  # (2^28)-1 sensitive surfaces

GEOID_MASKS = {
    "volume": VOLUME_MASK,
    "boundary": BOUNDARY_MASK,
    "layer": LAYER_MASK,
    "approach": APPROACH_MASK,
    "sensitive": SENSITIVE_MASK,
}

def _mask_shift(mask):
    return (mask & -mask).bit_length() - 1

def _pack(word, value, mask):
    value = int(value)
    shift = _mask_shift(mask)
    if value < 0 or (value << shift) & ~mask:
        raise ValueError(f"Value {value} does not fit into GeometryID mask {mask:#018x}")
    return (word & ~mask) | (value << shift)


class GeometryID:
    """Composite identifier of a volume, layer or surface in one tracking geometry."""

    __slots__ = ("_value",)

    def __init__(self, value=0, mask=None):
        if mask is None:
            value = int(value)
            if value < 0 or value > 0xffffffffffffffff:
                raise ValueError(f"GeometryID value {value} does not fit into 64 bits")
            packed = value
        else:
            packed = _pack(0, value, mask)
        object.__setattr__(self, "_value", packed)

    def __setattr__(self, name, value):
        raise AttributeError("GeometryID is immutable, use add() to derive a new identifier")

    @classmethod
    def from_fields(cls, volume=0, boundary=0, layer=0, approach=0, sensitive=0):
        return (cls(volume, VOLUME_MASK)
                .add(boundary, BOUNDARY_MASK)
                .add(layer, LAYER_MASK)
                .add(approach, APPROACH_MASK)
                .add(sensitive, SENSITIVE_MASK))

    def add(self, value, mask):
        """
        Returns a new GeometryID with `value` encoded into the field selected
        by `mask`, replacing whatever that field held. `self` is unchanged.
        """
        return GeometryID(_pack(self._value, value, mask))

    def value(self, mask=None):
        """Returns the decoded field selected by `mask`, or the full word if no mask is given."""
        if mask is None:
            return self._value
        return (self._value & mask) >> _mask_shift(mask)

    @property
    def volume(self): return self.value(VOLUME_MASK)
    @property
    def boundary(self): return self.value(BOUNDARY_MASK)
    @property
    def layer(self): return self.value(LAYER_MASK)
    @property
    def approach(self): return self.value(APPROACH_MASK)
    @property
    def sensitive(self): return self.value(SENSITIVE_MASK)

    def to_dict(self):
        return {name: self.value(mask) for name, mask in GEOID_MASKS.items()}

    @classmethod
    def from_dict(cls, data):
        return cls.from_fields(**{name: data.get(name, 0) for name in GEOID_MASKS})

    def __int__(self):
        return self._value

    def __index__(self):
        return self._value

    def __hash__(self):
        return hash(self._value)

    def __eq__(self, other):
        if isinstance(other, GeometryID):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other):
        return self._value < int(other)

    def __le__(self, other):
        return self._value <= int(other)

    def __gt__(self, other):
        return self._value > int(other)

    def __ge__(self, other):
        return self._value >= int(other)

    def __str__(self):
        return str(self._value)

    def __repr__(self):
        fields = " | ".join(f"{name[:3]} {val}" for name, val in self.to_dict().items())
        return f"GeometryID({fields})"


class Surface:
    """A surface of the tracking geometry; only its identifier and material matter here."""
    def __init__(self, geo_id, material=None):
        self.geo_id = geo_id if isinstance(geo_id, GeometryID) else GeometryID(geo_id)
        self.material = material # a MaterialDescriptor or None


class Layer:
    """Represents a layer: one representing surface, approach surfaces and sensitive surfaces."""
    def __init__(self, geo_id, representing=None, approach_surfaces=None, sensitive_surfaces=None):
        self.geo_id = geo_id if isinstance(geo_id, GeometryID) else GeometryID(geo_id)
        # Defaults to a bare surface sharing the layer's identifier
        self.representing = representing if representing is not None else Surface(self.geo_id)
        self.approach_surfaces = approach_surfaces if approach_surfaces else []
        self.sensitive_surfaces = sensitive_surfaces if sensitive_surfaces else []


class TrackingVolume:
    """Represents a tracking volume, possibly containing sub-volumes and layers."""
    def __init__(self, name, geo_id, material=None, boundary_surfaces=None,
                 confined_layers=None, confined_volumes=None):
        self.name = name
        self.geo_id = geo_id if isinstance(geo_id, GeometryID) else GeometryID(geo_id)
        self.material = material # volume material, a MaterialDescriptor or None
        self.boundary_surfaces = boundary_surfaces if boundary_surfaces else []
        self.confined_layers = confined_layers if confined_layers else []
        self.confined_volumes = confined_volumes if confined_volumes else []


class TrackingGeometry:
    """Root of a detector description: holds the highest tracking volume."""
    def __init__(self, world_volume):
        self.world_volume = world_volume
