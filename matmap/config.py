# matmap/config.py

DEFAULT_CONFIG = {
    # The geometry version, written as an informational tag
    "schema_version": "undefined",
    "version_key": "geoversion",
    # Field names of the document
    "detector_key": "detector",
    "volumes_key": "volumes",
    "name_key": "name",
    "boundaries_key": "boundaries",
    "layers_key": "layers",
    "volume_material_key": "material",
    "approach_key": "approach",
    "sensitive_key": "sensitive",
    "representing_key": "representing",
    "bin0_key": "bin0",
    "bin1_key": "bin1",
    "type_key": "type", # proto or data
    "data_key": "data",
    "geoid_key": "geoid",
    # Steering of which kinds are processed
    "process_sensitives": True,
    "process_approaches": True,
    "process_representing": True,
    "process_boundaries": True,
    "process_volumes": True,
    # False writes identifier-only entries without material payload
    "write_data": True,
    # Name of the converter, used for its logger
    "name": "JsonGeometryConverter",
}


class ConverterConfig:
    """
    Field names and processing toggles of a JsonGeometryConverter.
    Any of the DEFAULT_CONFIG entries can be overridden by keyword.
    """
    def __init__(self, **overrides):
        unknown = set(overrides) - set(DEFAULT_CONFIG)
        if unknown:
            raise ValueError(f"Unknown converter configuration field(s): {', '.join(sorted(unknown))}")

        for field, default in DEFAULT_CONFIG.items():
            value = overrides.get(field, default)
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    raise ValueError(f"Configuration field '{field}' must be a boolean, got {value!r}")
            elif not isinstance(value, str) or not value:
                raise ValueError(f"Configuration field '{field}' must be a non-empty string, got {value!r}")
            setattr(self, field, value)

        keys = [getattr(self, f) for f in DEFAULT_CONFIG if f.endswith("_key")]
        duplicates = {k for k in keys if keys.count(k) > 1}
        # Keys sharing one JSON object must stay distinguishable
        if duplicates:
            raise ValueError(f"Configuration uses the same field name more than once: {', '.join(sorted(duplicates))}")

    def to_dict(self):
        return {field: getattr(self, field) for field in DEFAULT_CONFIG}

    @classmethod
    def from_dict(cls, data):
        return cls(**data)

    def __repr__(self):
        changed = {f: v for f, v in self.to_dict().items() if v != DEFAULT_CONFIG[f]}
        return f"ConverterConfig({changed})"
