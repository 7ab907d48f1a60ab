"""Remote rendering: provisioning, site deployment, dispatch and retrieval."""

from .backend import MockRenderBackend, RenderBackend, get_render_backend
from .deployer import TransientSiteDeployer, new_site_name
from .dispatcher import RenderDispatcher
from .models import (
    BucketInfo,
    DeployedSite,
    FunctionInfo,
    ObjectLocation,
    RenderHandle,
    RenderLimits,
    RenderProgress,
)
from .provisioner import ResourceProvisioner
from .retriever import ArtifactRetriever

__all__ = [
    "ArtifactRetriever",
    "BucketInfo",
    "DeployedSite",
    "FunctionInfo",
    "MockRenderBackend",
    "ObjectLocation",
    "RenderBackend",
    "RenderDispatcher",
    "RenderHandle",
    "RenderLimits",
    "RenderProgress",
    "ResourceProvisioner",
    "TransientSiteDeployer",
    "get_render_backend",
    "new_site_name",
]
