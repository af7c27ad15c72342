# FILE: matmap/converter.py
import json

from .config import ConverterConfig
from .errors import MalformedInput
from .geometry_walker import GeometryWalker
from .json_parser import MaterialMapParser
from .json_writer import MaterialMapWriter
from .logging_config import get_converter_logger
from .material_codec import MaterialCodec


def _reject_duplicate_keys(pairs):
    document = {}
    for key, value in pairs:
        if key in document:
            raise MalformedInput(f"Duplicate key '{key}' in material map JSON")
        document[key] = value
    return document


class JsonGeometryConverter:
    """
    Converts the material overlay of a tracking geometry to and from JSON.

    The converter holds only its configuration and logger. Every call builds
    its own detector representation, so one converter can serve calls from
    several threads at once.
    """
    def __init__(self, config=None, logger=None):
        self.config = config if config is not None else ConverterConfig()
        self.logger = logger or get_converter_logger(self.config.name)
        self.codec = MaterialCodec(self.config, self.logger)

    def tracking_geometry_to_json(self, tracking_geometry):
        """Walks the full geometry and writes the material carrying parts."""
        walker = GeometryWalker(self.config, self.logger)
        det_rep = walker.convert(tracking_geometry)
        return MaterialMapWriter(self.config, self.logger, self.codec).rep_to_json(det_rep)

    def material_maps_to_json(self, surface_map, volume_map=None):
        """Writes already extracted GeometryID -> material maps."""
        writer = MaterialMapWriter(self.config, self.logger, self.codec)
        det_rep = writer.maps_to_rep(surface_map, volume_map or {})
        return writer.rep_to_json(det_rep)

    def json_to_material_maps(self, document):
        """
        Returns (surface_map, volume_map), both ordered by GeometryID.
        Raises MalformedInput, UnsupportedBinType or GeometryIdCollision.
        """
        return MaterialMapParser(self.config, self.logger, self.codec).parse(document)

    # --- JSON text and file helpers ---

    def save_to_json_string(self, document):
        return json.dumps(document, indent=2)

    def load_from_json_string(self, json_string):
        try:
            document = json.loads(json_string, object_pairs_hook=_reject_duplicate_keys)
        except json.JSONDecodeError as e:
            raise MalformedInput(f"Material map is not valid JSON: {e}") from e
        return self.json_to_material_maps(document)

    def write_json_file(self, filepath, document):
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self.save_to_json_string(document))
        self.logger.info(f"Saved material maps to {filepath}")

    def read_material_maps_file(self, filepath):
        with open(filepath, 'r', encoding='utf-8') as f:
            json_string = f.read()
        surfaces, volumes = self.load_from_json_string(json_string)
        self.logger.info(f"Read {len(surfaces)} surface and {len(volumes)} volume material(s) from {filepath}")
        return surfaces, volumes
