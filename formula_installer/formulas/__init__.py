"""Formula manifests bundled with formula-installer."""
