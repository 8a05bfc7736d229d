"""Resolution engine exports."""

from hcenav.resolve.definitions import DefinitionResolver, DefinitionSiteCache
from hcenav.resolve.engine import Navigator, is_haskell_file
from hcenav.resolve.hover import HoverInfo, HoverSection
from hcenav.resolve.locations import ConcreteLocation, ReferenceWithPackageId
from hcenav.resolve.modules import ModuleCache
from hcenav.resolve.packages import PackageInfo, PackageRegistry, discover_packages
from hcenav.resolve.position import Position, PositionResolver, WordRange
from hcenav.resolve.references import ReferenceAggregator

__all__ = [
    "ConcreteLocation",
    "DefinitionResolver",
    "DefinitionSiteCache",
    "HoverInfo",
    "HoverSection",
    "ModuleCache",
    "Navigator",
    "PackageInfo",
    "PackageRegistry",
    "Position",
    "PositionResolver",
    "ReferenceAggregator",
    "ReferenceWithPackageId",
    "WordRange",
    "discover_packages",
    "is_haskell_file",
]
