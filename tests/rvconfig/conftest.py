"""Shared fixtures and source texts for RVConfig tests."""

from typing import Callable, List

import pytest

from rvconfig import RVConfig


# The ACE medical items, written with the stringtable and path macros the mod uses
ACE_MEDICAL_MACRO_SOURCE = r"""class CfgWeapons {
    class ItemCore;
    class ACE_ItemCore;
    class CBA_MiscItem_ItemInfo;
    class InventoryFirstAidKitItem_Base_F;
    class MedikitItem;

    class FirstAidKit: ItemCore {
        type = 0;
        ACE_isMedicalItem = 1;
        class ItemInfo: InventoryFirstAidKitItem_Base_F {
            mass = 4;
        };
    };
    class Medikit: ItemCore {
        type = 0;
        ACE_isMedicalItem = 1;
        class ItemInfo: MedikitItem {
            mass = 60;
        };
    };

    class ACE_fieldDressing: ACE_ItemCore {
        scope = 2;
        author = ECSTRING(common,ACETeam);
        model = QPATHTOF(data\bandage.p3d);
        picture = QPATHTOF(ui\fieldDressing_ca.paa);
        displayName = CSTRING(Bandage_Basic_Display);
        descriptionShort = CSTRING(Bandage_Basic_Desc_Short);
        descriptionUse = CSTRING(Bandage_Basic_Desc_Use);
        ACE_isMedicalItem = 1;
        class ItemInfo: CBA_MiscItem_ItemInfo {
            mass = 0.6;
        };
    };
    class ACE_packingBandage: ACE_ItemCore {
        scope = 2;
        author = ECSTRING(common,ACETeam);
        displayName = CSTRING(Packing_Bandage_Display);
        picture = QPATHTOF(ui\packingBandage_ca.paa);
        model = QPATHTOF(data\packingbandage.p3d);
        descriptionShort = CSTRING(Packing_Bandage_Desc_Short);
        descriptionUse = CSTRING(Packing_Bandage_Desc_Use);
        ACE_isMedicalItem = 1;
        class ItemInfo: CBA_MiscItem_ItemInfo {
            mass = 0.6;
        };
    };
};
"""

# The same items with every macro already replaced by its text
ACE_MEDICAL_LITERAL_SOURCE = r"""class CfgWeapons {
    class ItemCore;
    class ACE_ItemCore;
    class CBA_MiscItem_ItemInfo;
    class InventoryFirstAidKitItem_Base_F;
    class MedikitItem;

    class FirstAidKit: ItemCore {
        type = 0;
        ACE_isMedicalItem = 1;
        class ItemInfo: InventoryFirstAidKitItem_Base_F {
            mass = 4;
        };
    };
    class Medikit: ItemCore {
        type = 0;
        ACE_isMedicalItem = 1;
        class ItemInfo: MedikitItem {
            mass = 60;
        };
    };

    class ACE_fieldDressing: ACE_ItemCore {
        scope = 2;
        author = "ACE-Team";
        model = "data\bandage.p3d";
        picture = "ui\fieldDressing_ca.paa";
        displayName = "Field Dressing";
        descriptionShort = "Basic bandage for wounds";
        descriptionUse = "Used for basic treatment";
        ACE_isMedicalItem = 1;
        class ItemInfo: CBA_MiscItem_ItemInfo {
            mass = 0.6;
        };
    };
    class ACE_packingBandage: ACE_ItemCore {
        scope = 2;
        author = "ACE-Team";
        displayName = "Packing Bandage";
        picture = "ui\packingBandage_ca.paa";
        model = "data\packingbandage.p3d";
        descriptionShort = "Bandage for deep wounds";
        descriptionUse = "Pack deep wounds";
        ACE_isMedicalItem = 1;
        class ItemInfo: CBA_MiscItem_ItemInfo {
            mass = 0.6;
        };
    };
};
"""

ACE_STRINGTABLE = {
    "Bandage_Basic_Display": "Field Dressing",
    "Bandage_Basic_Desc_Short": "Basic bandage for wounds",
    "Bandage_Basic_Desc_Use": "Used for basic treatment",
    "Packing_Bandage_Display": "Packing Bandage",
    "Packing_Bandage_Desc_Short": "Bandage for deep wounds",
    "Packing_Bandage_Desc_Use": "Pack deep wounds",
}


def ace_macro_resolver(name: str, args: List[str]) -> str | None:
    """Resolve the ACE macros to the text used in the literal source."""
    if name == "ECSTRING" and args == ["common", "ACETeam"]:
        return "ACE-Team"

    if name == "CSTRING" and len(args) == 1:
        return ACE_STRINGTABLE.get(args[0])

    if name == "QPATHTOF" and len(args) == 1:
        return args[0]

    return None


@pytest.fixture
def rvconfig():
    """Create a fresh session with no macro resolver for each test."""
    return RVConfig()


@pytest.fixture
def ace_rvconfig():
    """Create a fresh session that resolves the ACE macros."""
    return RVConfig(resolve_macro=ace_macro_resolver)


@pytest.fixture
def rvconfig_custom():
    """Factory for sessions with custom configuration."""
    def _create_rvconfig(
        resolve_macro: Callable[[str, List[str]], str | None] | None = None,
        max_workers: int = 4,
        report_unquoted_strings: bool = True
    ) -> RVConfig:
        return RVConfig(
            resolve_macro=resolve_macro,
            max_workers=max_workers,
            report_unquoted_strings=report_unquoted_strings
        )
    return _create_rvconfig


@pytest.fixture
def ace_macro_source():
    """ACE medical items written with macros."""
    return ACE_MEDICAL_MACRO_SOURCE


@pytest.fixture
def ace_literal_source():
    """ACE medical items written with literal values."""
    return ACE_MEDICAL_LITERAL_SOURCE


@pytest.fixture
def macro_resolver():
    """The resolver capability for the ACE macros."""
    return ace_macro_resolver
