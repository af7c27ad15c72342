# matmap/geometry_walker.py
import logging

from .geometry_types import (
    VOLUME_MASK, BOUNDARY_MASK, LAYER_MASK, APPROACH_MASK, SENSITIVE_MASK
)
from .rep_types import DetectorRep, VolumeRep, LayerRep


class GeometryWalker:
    """
    Walks a TrackingGeometry and collects the material-carrying volumes,
    layers and surfaces into a DetectorRep. Proto materials count as present.
    """
    def __init__(self, config, logger=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def convert(self, tracking_geometry):
        det_rep = DetectorRep()
        self.convert_volume(det_rep, tracking_geometry.world_volume)
        self.logger.debug(f"a2j: collected {len(det_rep.volumes)} volume(s) carrying material")
        return det_rep

    def convert_volume(self, det_rep, volume):
        """Recursive call: fills `det_rep` with `volume` and everything it confines."""
        cfg = self.config
        vol_rep = VolumeRep(volume.geo_id, volume.name)

        for sub_volume in volume.confined_volumes:
            self.convert_volume(det_rep, sub_volume)

        if cfg.process_volumes and volume.material is not None:
            vol_rep.material = volume.material

        for layer in volume.confined_layers:
            lay_rep = self.convert_layer(layer)
            if lay_rep:
                lid = layer.geo_id.value(LAYER_MASK)
                vol_rep.layers[lid] = lay_rep

        if cfg.process_boundaries:
            for surface in volume.boundary_surfaces:
                if surface.material is not None:
                    bid = surface.geo_id.value(BOUNDARY_MASK)
                    vol_rep.boundaries[bid] = surface.material

        if vol_rep:
            vid = volume.geo_id.value(VOLUME_MASK)
            if vid in det_rep.volumes:
                self.logger.warning(f"a2j: volume '{volume.name}' reuses volume index {vid}, previous entry replaced")
            self.logger.debug(f"a2j: -> volume '{volume.name}' ({vid}) carries material")
            det_rep.volumes[vid] = vol_rep

    def convert_layer(self, layer):
        cfg = self.config
        lay_rep = LayerRep(layer.geo_id)

        if cfg.process_sensitives:
            for surface in layer.sensitive_surfaces:
                if surface is None or surface.material is None:
                    continue
                sid = surface.geo_id.value(SENSITIVE_MASK)
                if sid == 0:
                    # Index 0 would collide with the representing surface
                    self.logger.warning(f"a2j: sensitive surface {surface.geo_id!r} has no sensitive index, skipped")
                    continue
                lay_rep.sensitives[sid] = surface.material

        if cfg.process_representing and layer.representing is not None \
                and layer.representing.material is not None:
            lay_rep.representing = layer.representing.material

        if cfg.process_approaches:
            for surface in layer.approach_surfaces:
                if surface.material is not None:
                    lay_rep.approaches[surface.geo_id.value(APPROACH_MASK)] = surface.material

        return lay_rep
