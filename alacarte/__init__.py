"""a-la-carte — declarative software provisioning across package managers."""

__version__ = "0.1.0"
