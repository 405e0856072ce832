"""
Site: resolved filesystem locations for one hosted domain.

A site is identified by its domain. All paths are derived from the
ToolsConfig passed in; nothing here touches the filesystem except the
existence checks.
"""

from dataclasses import dataclass
from pathlib import Path

from .config import ToolsConfig


WORDPRESS_MARKER = "wp-config.php"


@dataclass(frozen=True)
class Site:
    """
    Filesystem view of a hosted site.

    Attributes:
        domain: Site domain (directory name under websites_root)
        root: <websites_root>/<domain>
        html_path: Document root (<root>/html)
        vhconf_path: OpenLiteSpeed vhost config for the domain
    """
    domain: str
    root: Path
    html_path: Path
    vhconf_path: Path

    @classmethod
    def from_config(cls, domain: str, config: ToolsConfig) -> "Site":
        """Resolve a site's paths from configuration."""
        if not domain or not domain.strip():
            raise ValueError("Domain cannot be empty")
        if "/" in domain or domain in (".", ".."):
            raise ValueError(f"Invalid domain: {domain!r}")
        root = config.site_root(domain)
        return cls(
            domain=domain,
            root=root,
            html_path=root / "html",
            vhconf_path=config.vhconf_path(domain),
        )

    @property
    def exists(self) -> bool:
        """True if the site directory exists."""
        return self.root.is_dir()

    @property
    def is_wordpress(self) -> bool:
        """True if the document root holds a WordPress install."""
        return (self.html_path / WORDPRESS_MARKER).is_file()
