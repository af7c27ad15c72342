import pytest

from matmap.config import ConverterConfig
from matmap.converter import JsonGeometryConverter
from matmap.geometry_types import GeometryID, Surface, Layer, TrackingVolume, TrackingGeometry
from matmap.material_types import MaterialDescriptor, MaterialProperties, BinAxis

SILICON = MaterialProperties(1.0, 9.37, 46.0, 28.09, 14, 2.33)
BERYLLIUM = MaterialProperties(0.8, 352.8, 407.0, 9.012, 4, 1.848)
ALUMINIUM = MaterialProperties(2.0, 88.97, 388.0, 26.98, 13, 2.7)


def binned_2d():
    # 3 bins in phi, 2 bins in z
    axes = [BinAxis.equidistant(3, -3.14, 3.14), BinAxis.arbitrary([-100.0, 0.0, 250.0])]
    matrix = [
        [SILICON, BERYLLIUM, MaterialProperties()],
        [ALUMINIUM, SILICON, BERYLLIUM],
    ]
    return MaterialDescriptor.binned(axes, matrix)


def binned_1d():
    return MaterialDescriptor.binned([BinAxis.equidistant(2, 0.0, 1.0)], [[SILICON, ALUMINIUM]])


def build_geometry():
    """
    World (vol 1, volume material)
     |- Pixel (vol 2): boundary 1, layer 2 with two sensitives and one approach
     |- Strip (vol 3): layer 4 with a representing proto, boundary 2 without material
     |- Gap (vol 4): no material anywhere
    """
    pixel_id = GeometryID.from_fields(volume=2)
    pixel_layer_id = GeometryID.from_fields(volume=2, layer=2)
    pixel_layer = Layer(
        pixel_layer_id,
        approach_surfaces=[
            Surface(GeometryID.from_fields(volume=2, layer=2, approach=1), MaterialDescriptor.proto()),
            Surface(GeometryID.from_fields(volume=2, layer=2, approach=2)),
        ],
        sensitive_surfaces=[
            Surface(GeometryID.from_fields(volume=2, layer=2, sensitive=1), binned_2d()),
            Surface(GeometryID.from_fields(volume=2, layer=2, sensitive=2), MaterialDescriptor.homogeneous(SILICON)),
            Surface(GeometryID.from_fields(volume=2, layer=2, sensitive=3)),
        ],
    )
    pixel = TrackingVolume(
        "Pixel", pixel_id,
        boundary_surfaces=[Surface(GeometryID.from_fields(volume=2, boundary=1), MaterialDescriptor.homogeneous(BERYLLIUM))],
        confined_layers=[pixel_layer, Layer(GeometryID.from_fields(volume=2, layer=4))],
    )

    strip_layer_id = GeometryID.from_fields(volume=3, layer=4)
    strip = TrackingVolume(
        "Strip", GeometryID.from_fields(volume=3),
        boundary_surfaces=[Surface(GeometryID.from_fields(volume=3, boundary=2))],
        confined_layers=[Layer(strip_layer_id, representing=Surface(strip_layer_id, binned_1d()))],
    )

    gap = TrackingVolume(
        "Gap", GeometryID.from_fields(volume=4),
        boundary_surfaces=[Surface(GeometryID.from_fields(volume=4, boundary=1))],
        confined_layers=[Layer(GeometryID.from_fields(volume=4, layer=2),
                               sensitive_surfaces=[Surface(GeometryID.from_fields(volume=4, layer=2, sensitive=1))])],
    )

    world = TrackingVolume(
        "World", GeometryID.from_fields(volume=1),
        material=MaterialDescriptor.homogeneous(ALUMINIUM),
        confined_volumes=[pixel, strip, gap],
    )
    return TrackingGeometry(world)


@pytest.fixture
def geometry():
    return build_geometry()


@pytest.fixture
def converter():
    return JsonGeometryConverter(ConverterConfig())
