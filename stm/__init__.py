"""Release pipeline for Smart TCP Manager (netopt-gui + netopt-service)."""

__version__ = "0.3.0"
