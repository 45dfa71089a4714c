from .step_10_install_dependencies import InstallDependenciesStep
from .step_20_install_font import InstallFontStep
from .step_30_install_oh_my_zsh import InstallOhMyZshStep
from .step_40_install_theme import InstallThemeStep
from .step_45_configure_autoupdate import ConfigureAutoupdateStep
from .step_50_install_plugins import InstallPluginsStep
from .step_60_configure_plugins import ConfigurePluginsStep
from .step_70_change_shell import ChangeShellStep
from .step_80_install_p10k_config import InstallP10kConfigStep
from .step_90_summary import SummaryStep

__all__ = [
    "InstallDependenciesStep",
    "InstallFontStep",
    "InstallOhMyZshStep",
    "InstallThemeStep",
    "ConfigureAutoupdateStep",
    "InstallPluginsStep",
    "ConfigurePluginsStep",
    "ChangeShellStep",
    "InstallP10kConfigStep",
    "SummaryStep",
]
