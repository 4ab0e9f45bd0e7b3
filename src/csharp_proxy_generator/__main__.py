"""Console script entry point."""

from csharp_proxy_generator.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
