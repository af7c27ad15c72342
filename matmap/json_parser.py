# matmap/json_parser.py
import logging
import re

from .errors import MalformedInput, GeometryIdCollision
from .geometry_types import (
    GeometryID, VOLUME_MASK, BOUNDARY_MASK, LAYER_MASK, APPROACH_MASK, SENSITIVE_MASK
)
from .material_codec import MaterialCodec

# Local key standing for "index 0" of approach and sensitive surfaces
WILDCARD_KEY = "*"

_INDEX_RE = re.compile(r"[0-9]+")


class MaterialMapParser:
    """
    Reads a material map document back into flat surface and volume maps.

    Identifiers are rebuilt from the nesting: the volume key, the layer key
    and the local key of the surface are packed into one GeometryID. The
    optional geoid fields of the entries are only cross-checked.
    """
    def __init__(self, config, logger=None, codec=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.codec = codec or MaterialCodec(config, self.logger)

    def parse(self, document):
        cfg = self.config
        if not isinstance(document, dict):
            raise MalformedInput(f"Material map document must be an object, got {type(document).__name__}")

        if cfg.version_key in document:
            self.logger.debug(f"j2a: geometry version '{document[cfg.version_key]}'")

        # Both the wrapped and the bare volumes layout are accepted
        detector_j = document.get(cfg.detector_key, document)
        self._require_object(detector_j, cfg.detector_key)

        surfaces, volumes = {}, {}
        surface_paths, volume_paths = {}, {}

        volumes_j = detector_j.get(cfg.volumes_key)
        if volumes_j is None:
            self.logger.debug("j2a: no volumes found in document")
            return surfaces, volumes
        self._require_object(volumes_j, cfg.volumes_key)
        self.logger.debug(f"j2a: found entries for {len(volumes_j)} volume(s)")

        for vkey, vol_j in volumes_j.items():
            vpath = f"{cfg.volumes_key}/{vkey}"
            volume_id = self._compose(GeometryID(), vkey, VOLUME_MASK, vpath)
            self._require_object(vol_j, vpath)
            self.logger.debug(f"j2a: -> found volume {vkey}")

            for vckey, vc_j in vol_j.items():
                path = f"{vpath}/{vckey}"
                if vckey == cfg.boundaries_key:
                    if not cfg.process_boundaries:
                        continue
                    self._require_object(vc_j, path)
                    for bkey, b_j in vc_j.items():
                        boundary_id = self._compose(volume_id, bkey, BOUNDARY_MASK, f"{path}/{bkey}")
                        self._insert(surfaces, surface_paths, boundary_id, b_j, f"{path}/{bkey}")
                elif vckey == cfg.layers_key:
                    self._require_object(vc_j, path)
                    for lkey, lay_j in vc_j.items():
                        self.parse_layer(volume_id, lkey, lay_j, f"{path}/{lkey}", surfaces, surface_paths)
                elif vckey == cfg.volume_material_key:
                    if cfg.process_volumes:
                        self._insert(volumes, volume_paths, volume_id, vc_j, path)

        return self._sorted(surfaces), self._sorted(volumes)

    def parse_layer(self, volume_id, lkey, lay_j, lpath, surfaces, surface_paths):
        cfg = self.config
        layer_id = self._compose(volume_id, lkey, LAYER_MASK, lpath)
        self._require_object(lay_j, lpath)
        self.logger.debug(f"j2a: ---> found layer {lkey}")

        for lckey, lc_j in lay_j.items():
            path = f"{lpath}/{lckey}"
            if lckey == cfg.representing_key:
                if cfg.process_representing:
                    self._insert(surfaces, surface_paths, layer_id, lc_j, path)
            elif lckey == cfg.approach_key or lckey == cfg.sensitive_key:
                if lckey == cfg.approach_key:
                    enabled, mask = cfg.process_approaches, APPROACH_MASK
                else:
                    enabled, mask = cfg.process_sensitives, SENSITIVE_MASK
                if not enabled:
                    continue
                self._require_object(lc_j, path)
                for skey, s_j in lc_j.items():
                    surface_id = self._compose(layer_id, skey, mask, f"{path}/{skey}")
                    self._insert(surfaces, surface_paths, surface_id, s_j, f"{path}/{skey}")

    def _insert(self, target, claimed, geo_id, entry_j, path):
        material = self.codec.from_json(entry_j, path)
        if material is None:
            return

        written_id = entry_j.get(self.config.geoid_key)
        if written_id is not None and str(written_id) != str(int(geo_id)):
            self.logger.warning(
                f"j2a: '{path}' states geoid {written_id} but its position gives {int(geo_id)}, using the latter"
            )

        if geo_id in claimed:
            raise GeometryIdCollision(geo_id, claimed[geo_id], path)
        claimed[geo_id] = path
        target[geo_id] = material

    def _compose(self, parent_id, key, mask, path):
        """Returns `parent_id` extended by the local index `key` packed into `mask`."""
        if key == WILDCARD_KEY and mask in (APPROACH_MASK, SENSITIVE_MASK):
            index = 0
        elif isinstance(key, str) and _INDEX_RE.fullmatch(key):
            index = int(key)
        else:
            raise MalformedInput(f"Key '{key}' at '{path}' is not a non-negative integer index")
        try:
            return parent_id.add(index, mask)
        except ValueError as e:
            raise MalformedInput(f"Index {index} at '{path}' is out of range: {e}") from e

    def _require_object(self, value, path):
        if not isinstance(value, dict):
            raise MalformedInput(f"Expected an object at '{path}', got {type(value).__name__}")

    def _sorted(self, material_map):
        return dict(sorted(material_map.items(), key=lambda item: int(item[0])))
