"""Cluster provisioning: the Cluster asset and its Terraform/template collaborators."""

from clusterforge.cluster.cluster import Cluster, workspace
from clusterforge.cluster.templates import TemplateError, TemplateSource, TemplateUnpacker
from clusterforge.cluster.terraform import (
    STATE_FILE_NAME,
    ProvisioningTool,
    Terraform,
    TerraformError,
    ToolError,
)
from clusterforge.cluster.variables import ClusterVariables, parse_variables

__all__ = [
    "Cluster",
    "workspace",
    "ClusterVariables",
    "parse_variables",
    "TemplateSource",
    "TemplateUnpacker",
    "TemplateError",
    "Terraform",
    "TerraformError",
    "ToolError",
    "ProvisioningTool",
    "STATE_FILE_NAME",
]
