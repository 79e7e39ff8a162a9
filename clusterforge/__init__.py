"""Clusterforge: asset nodes that produce what is needed to stand up a cluster.

Every node implements the ``Asset`` contract (``asset_id``, ``name``,
``dependencies()``, ``generate()``) and produces a ``State``: an ordered
set of named byte blobs.

  - ``KeyPair``: RSA private/public key pair as two PEM blobs.
  - ``Cluster``: runs Terraform init/apply in a scratch workspace and
    returns ``terraform.tfstate``, recovering partial state on failure.
  - ``Orchestrator``: resolves a target's ancestors in order and persists
    outputs through the ``AssetStore``.
"""

__version__ = "0.1.0"
__description__ = "Asset nodes for standing up a cluster: Terraform provisioning and TLS key material"

from clusterforge.assets.base import Asset, GenerationError
from clusterforge.cluster.cluster import Cluster
from clusterforge.core.orchestrator import Orchestrator
from clusterforge.models.state import Content, GenerationResult, State
from clusterforge.tls.keypair import KeyPair

__all__ = [
    "Asset",
    "GenerationError",
    "Content",
    "State",
    "GenerationResult",
    "KeyPair",
    "Cluster",
    "Orchestrator",
    "__version__",
]
