from avalonia_mcp.resources.controls import ControlsResource
from avalonia_mcp.resources.migration_guide import MigrationGuideResource
from avalonia_mcp.resources.xaml_patterns import XamlPatternsResource

__all__ = ["ControlsResource", "MigrationGuideResource", "XamlPatternsResource"]
