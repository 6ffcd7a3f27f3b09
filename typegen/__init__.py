"""typegen: metadata-driven C# and TypeScript source generation."""

__version__ = "0.1.0"
