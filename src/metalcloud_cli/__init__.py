"""metalcloud-cli — command-line client for the Metal Cloud API.

Instances, instance arrays and infrastructures are managed through a
small table of commands layered over a JSON-RPC client.
"""

from metalcloud_cli.version import __version__

__all__: list[str] = ["__version__"]
