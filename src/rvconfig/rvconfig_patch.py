"""CfgPatches entries read from resolved property tables."""

from dataclasses import dataclass, field
from typing import List

from rvconfig.rvconfig_ast import leaf_name
from rvconfig.rvconfig_property_table import RVConfigPropertyTable
from rvconfig.rvconfig_value import RVConfigArray, RVConfigNumber, RVConfigValue


@dataclass(frozen=True)
class RVConfigPatch:
    """One addon declared under `CfgPatches`."""
    name: str
    required_version: float = 0.0
    required_addons: List[str] = field(default_factory=list)
    units: List[str] = field(default_factory=list)
    weapons: List[str] = field(default_factory=list)

    @classmethod
    def from_table(cls, table: RVConfigPropertyTable) -> 'RVConfigPatch':
        """
        Build a patch from the resolved table of a `CfgPatches` member class.

        A missing or non-numeric `requiredVersion` reads as 0.0; missing lists read as empty.
        """
        version = table.get("requiredVersion")
        return cls(
            name=leaf_name(table.qualified_name),
            required_version=version.value if isinstance(version, RVConfigNumber) else 0.0,
            required_addons=_string_list(table.get("requiredAddons")),
            units=_string_list(table.get("units")),
            weapons=_string_list(table.get("weapons"))
        )


def _string_list(value: RVConfigValue | None) -> List[str]:
    if not isinstance(value, RVConfigArray):
        return []

    return [str(item.to_python()) for item in value.items]
