"""Tests for the Bambu Lab model table."""

from machine_api.bambu import BambuFamily
from machine_api.bambu.models import BambuModel, UnknownModel
from machine_api.config import BambuLabsConfig


def test_bambu_model_from_code() -> None:
    """Test the from_code method of the BambuModel enum."""
    # Test known models
    assert BambuModel.from_code("N1") == BambuModel.A1_MINI
    assert BambuModel.from_code("N2S") == BambuModel.A1
    assert BambuModel.from_code("C11") == BambuModel.P1P
    assert BambuModel.from_code("C12") == BambuModel.P1S
    assert BambuModel.from_code("BL-P001") == BambuModel.X1_CARBON

    # Test unknown models keep their code
    assert BambuModel.from_code("ZZ-9") == UnknownModel("ZZ-9")
    assert BambuModel.from_code("") == UnknownModel("")
    assert BambuModel.from_code(None) == UnknownModel("Unknown")

    # Test case sensitivity (should be case-sensitive)
    assert BambuModel.from_code("bl-p001") == UnknownModel("bl-p001")


def test_bambu_model_names() -> None:
    """Test the display names of the models."""
    assert str(BambuModel.X1_CARBON) == "Bambu Lab X1 Carbon"
    assert BambuModel.A1_MINI.display_name == "Bambu Lab A1 mini"
    assert str(UnknownModel("ZZ-9")) == "ZZ-9"

    for model in BambuModel:
        assert model.display_name.startswith("Bambu Lab ")


def test_family_resolve_model() -> None:
    """Test that the family resolves model codes to strings."""
    family = BambuFamily(BambuLabsConfig())

    assert family.resolve_model("C12") == "Bambu Lab P1S"
    assert family.resolve_model("ZZ-9") == "ZZ-9"
    assert family.resolve_model(None) == "Unknown"
