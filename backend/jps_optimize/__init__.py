"""
jps_optimize: preset-driven optimization for OpenLiteSpeed WordPress sites.

A preset names PHP overrides (written to the site's vhconf.conf
phpIniOverride block) and LiteSpeed Cache options (set through WP-CLI).
The engine applies presets, validates the result, and snapshots the
current state for reports.

Subpackages:
- presets:    parsing and the on-disk registry
- vhost:      line-preserving vhconf.conf block editing with backups
- wpcli:      WP-CLI subprocess wrapper
- optimize:   applying presets to sites
- validation: comparing live state with a preset
- reporting:  settings snapshots (JSON / TXT)
"""

__version__ = "1.0.0"
