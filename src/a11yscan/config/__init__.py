from .settings import (
    ComplianceOptions,
    ScannerSettings,
    WCAG_LEVELS,
    load_settings,
    load_compliance_defaults
)

__all__ = [
    'ComplianceOptions',
    'ScannerSettings',
    'WCAG_LEVELS',
    'load_settings',
    'load_compliance_defaults'
]
