"""mdshield - markdown reformatting that protects code, front matter and links."""

__version__ = "0.1.0"
