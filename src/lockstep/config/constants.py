"""Configuration constants.

File names and protocol details that follow from the tools lockstep reads.
For configurable values, see models.py.
"""

MANIFEST_NAME = "Cargo.toml"
"""Manifest file name at every project root and workspace member."""

LOCKFILE_NAME = "Cargo.lock"
"""Resolved lockfile name at every project root."""

CONFIG_FILE_NAME = "lockstep.yaml"
"""Optional config file looked up in the working directory."""

DEFAULT_INTEGRATOR = "omicron"
"""Repository that consumes prebuilt artifacts from the others."""

DEFAULT_PACKAGE_MANIFEST = "package-manifest.toml"
"""Package manifest path inside the integrator checkout."""

DEFAULT_ARTIFACT_URL_TEMPLATE = (
    "https://buildomat.eng.oxide.computer/public/file/oxidecomputer/"
    "{repo}/image/{revision}/{artifact}.sha256.txt"
)
"""Where the build server publishes the digest of each prebuilt image."""
