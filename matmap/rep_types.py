# matmap/rep_types.py
#
# Transient, sparse mirror of the detector hierarchy used to drive JSON
# assembly for one conversion call. Material entries are references into the
# caller's geometry tree or maps and are never copied.

class LayerRep:
    """Layer representation for JSON writing."""
    def __init__(self, layer_id=None):
        self.layer_id = layer_id
        self.sensitives = {} # local sensitive index -> MaterialDescriptor
        self.approaches = {} # local approach index -> MaterialDescriptor
        self.representing = None

    def __bool__(self):
        # Worth writing out?
        return bool(self.sensitives or self.approaches or self.representing is not None)


class VolumeRep:
    """Volume representation for JSON writing."""
    def __init__(self, volume_id=None, name=""):
        self.volume_id = volume_id
        self.name = name
        self.layers = {} # local layer index -> LayerRep
        self.boundaries = {} # local boundary index -> MaterialDescriptor
        self.material = None

    def __bool__(self):
        return bool(any(self.layers.values()) or self.boundaries or self.material is not None)


class DetectorRep:
    """Detector representation for JSON writing: the volumes worth writing, by local index."""
    def __init__(self):
        self.volumes = {}

    def __bool__(self):
        return any(self.volumes.values())
