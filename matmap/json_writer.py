# matmap/json_writer.py
import logging

from .geometry_types import (
    GeometryID, VOLUME_MASK, BOUNDARY_MASK, LAYER_MASK, APPROACH_MASK, SENSITIVE_MASK
)
from .material_codec import MaterialCodec
from .rep_types import DetectorRep, VolumeRep, LayerRep


class MaterialMapWriter:
    """
    Assembles the material map document from a DetectorRep. Volumes, layers
    and surfaces are written in ascending index order and empty ones are left
    out, so identical input always gives an identical document.
    """
    def __init__(self, config, logger=None, codec=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.codec = codec or MaterialCodec(config, self.logger)

    def maps_to_rep(self, surface_map, volume_map):
        """Sorts flat GeometryID -> material maps into a DetectorRep."""
        cfg = self.config
        det_rep = DetectorRep()

        def volume_rep(vid):
            if vid not in det_rep.volumes:
                det_rep.volumes[vid] = VolumeRep(GeometryID(vid, VOLUME_MASK))
            return det_rep.volumes[vid]

        for key, material in sorted(surface_map.items(), key=lambda item: int(item[0])):
            geo_id = key if isinstance(key, GeometryID) else GeometryID(key)
            vid = geo_id.value(VOLUME_MASK)
            bid = geo_id.value(BOUNDARY_MASK)
            lid = geo_id.value(LAYER_MASK)
            aid = geo_id.value(APPROACH_MASK)
            sid = geo_id.value(SENSITIVE_MASK)

            if lid != 0 and bid == 0 and not (aid and sid):
                if sid != 0:
                    kind, enabled = "sensitive", cfg.process_sensitives
                elif aid != 0:
                    kind, enabled = "approach", cfg.process_approaches
                else:
                    kind, enabled = "representing", cfg.process_representing
                if not enabled:
                    continue

                vol_rep = volume_rep(vid)
                if lid not in vol_rep.layers:
                    vol_rep.layers[lid] = LayerRep(vol_rep.volume_id.add(lid, LAYER_MASK))
                lay_rep = vol_rep.layers[lid]
                if kind == "sensitive":
                    lay_rep.sensitives[sid] = material
                elif kind == "approach":
                    lay_rep.approaches[aid] = material
                else:
                    lay_rep.representing = material
            elif lid == 0 and bid != 0 and aid == 0 and sid == 0:
                if cfg.process_boundaries:
                    volume_rep(vid).boundaries[bid] = material
            else:
                self.logger.warning(f"a2j: surface {geo_id!r} is neither a boundary nor a layer surface, skipped")

        if cfg.process_volumes:
            for key, material in sorted(volume_map.items(), key=lambda item: int(item[0])):
                geo_id = key if isinstance(key, GeometryID) else GeometryID(key)
                vid = geo_id.value(VOLUME_MASK)
                if geo_id != GeometryID(vid, VOLUME_MASK):
                    self.logger.warning(f"a2j: volume material key {geo_id!r} is not a volume identifier, skipped")
                    continue
                volume_rep(vid).material = material

        return det_rep

    def rep_to_json(self, det_rep):
        cfg = self.config
        self.logger.debug(f"a2j: writing json from detector representation with {len(det_rep.volumes)} volume(s)")

        volumes_j = {}
        for vid in sorted(det_rep.volumes):
            vol_rep = det_rep.volumes[vid]
            if not vol_rep:
                continue
            volume_id = vol_rep.volume_id if vol_rep.volume_id is not None else GeometryID(vid, VOLUME_MASK)
            self.logger.debug(f"a2j: -> writing volume {vid}")

            vol_j = {}
            if vol_rep.name:
                vol_j[cfg.name_key] = vol_rep.name
            vol_j[cfg.geoid_key] = str(int(volume_id))

            if vol_rep.boundaries:
                vol_j[cfg.boundaries_key] = {
                    str(bid): self.codec.to_json(vol_rep.boundaries[bid], volume_id.add(bid, BOUNDARY_MASK))
                    for bid in sorted(vol_rep.boundaries)
                }

            layers_j = {}
            for lid in sorted(vol_rep.layers):
                lay_rep = vol_rep.layers[lid]
                if lay_rep:
                    layers_j[str(lid)] = self.layer_to_json(lay_rep, volume_id, lid)
            if layers_j:
                self.logger.debug(f"a2j: ---> wrote {len(layers_j)} layer(s)")
                vol_j[cfg.layers_key] = layers_j

            if vol_rep.material is not None:
                vol_j[cfg.volume_material_key] = self.codec.to_json(vol_rep.material, volume_id)

            volumes_j[str(vid)] = vol_j

        document = {}
        if volumes_j:
            document[cfg.detector_key] = {cfg.volumes_key: volumes_j}
        document[cfg.version_key] = cfg.schema_version
        return document

    def layer_to_json(self, lay_rep, volume_id, lid):
        cfg = self.config
        layer_id = lay_rep.layer_id if lay_rep.layer_id is not None else volume_id.add(lid, LAYER_MASK)
        lay_j = {cfg.geoid_key: str(int(layer_id))}

        if lay_rep.approaches:
            lay_j[cfg.approach_key] = {
                str(aid): self.codec.to_json(lay_rep.approaches[aid], layer_id.add(aid, APPROACH_MASK))
                for aid in sorted(lay_rep.approaches)
            }
        if lay_rep.sensitives:
            lay_j[cfg.sensitive_key] = {
                str(sid): self.codec.to_json(lay_rep.sensitives[sid], layer_id.add(sid, SENSITIVE_MASK))
                for sid in sorted(lay_rep.sensitives)
            }
        if lay_rep.representing is not None:
            lay_j[cfg.representing_key] = self.codec.to_json(lay_rep.representing, layer_id)
        return lay_j
