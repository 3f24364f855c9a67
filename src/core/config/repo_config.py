"""
Registry source configuration.

Where the SIG registry and the per-SIG OWNERS documents are read from.
"""

from dataclasses import dataclass


@dataclass
class RegistrySourceConfig:
    """Location of the SIG ownership registry."""

    repo: str = "opensourceways/community"
    path: str = "sig/sigs.yaml"
    ref: str = "master"


@dataclass
class OwnersSourceConfig:
    """Location of per-SIG OWNERS documents. `{sig}` is replaced with the SIG name."""

    repo: str = "opengauss/tc"
    path_template: str = "sigs/{sig}/OWNERS"
    ref: str = "master"

    def path_for(self, sig_name: str) -> str:
        return self.path_template.format(sig=sig_name)
