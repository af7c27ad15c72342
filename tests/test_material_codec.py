import pytest
import numpy as np

from matmap.config import ConverterConfig
from matmap.errors import MalformedInput, UnsupportedBinType
from matmap.material_codec import MaterialCodec
from matmap.material_types import (
    MaterialDescriptor, MaterialProperties, BinAxis, PROTO, HOMOGENEOUS, BINNED_1D, BINNED_2D
)
from conftest import SILICON, ALUMINIUM, binned_1d, binned_2d


@pytest.fixture
def codec():
    return MaterialCodec(ConverterConfig())


def test_proto_without_axes(codec):
    mj = codec.to_json(MaterialDescriptor.proto())
    assert mj == {"type": "proto"}

    material = codec.from_json(mj)
    assert material.kind == PROTO
    assert material.bins == 0
    assert material.data is None

def test_proto_keeps_binning(codec):
    proto = MaterialDescriptor.proto([BinAxis.equidistant(10, 0.0, 5.0)])
    mj = codec.to_json(proto)
    assert "data" not in mj
    assert mj["bin0"] == ["equidistant", 10, 0.0, 5.0]
    assert codec.from_json(mj) == proto
    assert codec.from_json(mj).bins == 10

def test_homogeneous(codec):
    mj = codec.to_json(MaterialDescriptor.homogeneous(SILICON), geo_id=42)
    assert mj["geoid"] == "42"
    assert mj["type"] == "data"
    assert "bin0" not in mj
    assert mj["data"] == [[1.0, 9.37, 46.0, 28.09, 14.0, 2.33]]

    material = codec.from_json(mj)
    assert material.kind == HOMOGENEOUS
    assert material.properties() == SILICON

def test_binned_2d_row_order(codec):
    material = binned_2d()
    mj = codec.to_json(material)
    assert mj["bin0"] == ["equidistant", 3, -3.14, 3.14]
    assert mj["bin1"] == ["arbitrary", 2, [-100.0, 0.0, 250.0]]
    # First axis varies fastest; the vacuum cell is written as an empty row
    assert len(mj["data"]) == 6
    assert mj["data"][0] == SILICON.to_list()
    assert mj["data"][2] == []
    assert mj["data"][3] == ALUMINIUM.to_list()

    decoded = codec.from_json(mj)
    assert decoded.kind == BINNED_2D
    assert decoded.shape == (2, 3)
    assert decoded.properties(bin0=0, bin1=1) == ALUMINIUM
    assert decoded.properties(bin0=2, bin1=0).is_vacuum()
    assert decoded == material

def test_binned_1d(codec):
    decoded = codec.from_json(codec.to_json(binned_1d()))
    assert decoded.kind == BINNED_1D
    assert decoded.shape == (1, 2)
    assert np.allclose(decoded.data[0, 1], ALUMINIUM.to_list())

def test_single_bin_axes_stay_binned(codec):
    axes = [BinAxis.equidistant(1, 0, 1), BinAxis.equidistant(1, -1, 1)]
    material = MaterialDescriptor.binned(axes, [[SILICON]])
    decoded = codec.from_json(codec.to_json(material))
    assert decoded.kind == BINNED_2D
    assert decoded == material

def test_nested_matrix_is_accepted(codec):
    mj = {
        "type": "data",
        "bin0": ["equidistant", 2, 0, 1],
        "data": [[SILICON.to_list(), []]],
    }
    decoded = codec.from_json(mj)
    assert decoded.shape == (1, 2)
    assert decoded.properties(0) == SILICON
    assert decoded.properties(1).is_vacuum()

def test_shape_mismatch(codec):
    mj = codec.to_json(binned_2d())
    mj["data"] = mj["data"][:-1]
    with pytest.raises(MalformedInput):
        codec.from_json(mj)

    mj = {"type": "data", "bin0": ["equidistant", 2, 0, 1], "data": [[SILICON.to_list()]]}
    with pytest.raises(MalformedInput):
        codec.from_json(mj)

def test_unknown_type(codec):
    with pytest.raises(MalformedInput):
        codec.from_json({"type": "binned", "data": [SILICON.to_list()]})

def test_unknown_bin_strategy(codec):
    mj = {"type": "data", "bin0": ["logarithmic", 2, 1, 100], "data": [[], []]}
    with pytest.raises(UnsupportedBinType) as excinfo:
        codec.from_json(mj)
    assert excinfo.value.strategy == "logarithmic"

@pytest.mark.parametrize("bin0", [
    ["equidistant", 0, 0, 1],
    ["equidistant", 2, 1, 0],
    ["equidistant", 2.5, 0, 1],
    ["equidistant", 2, 0],
    ["arbitrary", 2, [0, 1]],
    ["arbitrary", 2, [0, 2, 1]],
    ["equidistant", 10**400, 0, 1],
    ["equidistant", 2, 0, 10**400],
    ["arbitrary", 2, [0, 1, 10**400]],
    "equidistant",
])
def test_malformed_bin_descriptor(codec, bin0):
    with pytest.raises(MalformedInput):
        codec.from_json({"type": "data", "bin0": bin0, "data": [[], []]})

def test_bin1_without_bin0(codec):
    with pytest.raises(MalformedInput):
        codec.from_json({"type": "data", "bin1": ["equidistant", 2, 0, 1], "data": [[], []]})

@pytest.mark.parametrize("data", [None, [], [[1, 2, 3]], [["a", 1, 1, 1, 1, 1]], [5], [[10**400, 1, 1, 1, 1, 1]]])
def test_malformed_cells(codec, data):
    mj = {"type": "data"}
    if data is not None:
        mj["data"] = data
    with pytest.raises(MalformedInput):
        codec.from_json(mj)

def test_structural_entry_is_skipped(codec):
    assert codec.from_json({"geoid": "12"}) is None
    with pytest.raises(MalformedInput):
        codec.from_json({"data": [SILICON.to_list()]})

def test_write_data_off():
    codec = MaterialCodec(ConverterConfig(write_data=False))
    assert codec.to_json(binned_2d(), geo_id=7) == {"geoid": "7"}

def test_custom_field_names():
    codec = MaterialCodec(ConverterConfig(type_key="kind", data_key="cells", bin0_key="axis0"))
    mj = codec.to_json(binned_1d())
    assert set(mj) == {"kind", "axis0", "cells"}
    assert codec.from_json(mj) == binned_1d()

def test_encode_rejects_non_descriptor(codec):
    with pytest.raises(TypeError):
        codec.to_json(SILICON)

def test_arbitrary_axis_bin_count():
    axis = BinAxis.arbitrary([0.0, 1.0, 10.0])
    assert axis.bins == 2
    assert axis.boundaries == [0.0, 1.0, 10.0]

def test_material_properties_from_list():
    assert MaterialProperties.from_list([]).is_vacuum()
    with pytest.raises(ValueError):
        MaterialProperties.from_list([1.0, 2.0])
