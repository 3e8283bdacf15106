"""Reconciliation and dependency-ordering engine.

Layered flow:
1) a lifecycle trigger hands bundles to the ``BundleResolver``
2) each bundle body applies objects through the ``ObjectReconciler``
   (directly, or through a version-gated package import)
3) the reconciler dispatches per type through the ``HandlerRegistry``
4) content managers and chores run at their own synchronisation points
"""

from __future__ import annotations

from .bundles import BundleContext, BundleInstallReport, BundleResolver, MetadataBundle
from .chores import Chore, ChoreRunner
from .content import ContentManager, ContentRefresher, RefreshResult, order_by_priority
from .packages import (
    PACKAGE_FILENAME_PATTERN,
    PackageDescriptor,
    PackageInstaller,
    parse_package_version,
)
from .reconciler import ObjectReconciler
from .registry import HandlerRegistry
from .service import DeployService
from .sources import IterableSource

__all__ = [
    "PACKAGE_FILENAME_PATTERN",
    "BundleContext",
    "BundleInstallReport",
    "BundleResolver",
    "Chore",
    "ChoreRunner",
    "ContentManager",
    "ContentRefresher",
    "DeployService",
    "HandlerRegistry",
    "IterableSource",
    "MetadataBundle",
    "ObjectReconciler",
    "PackageDescriptor",
    "PackageInstaller",
    "RefreshResult",
    "order_by_priority",
    "parse_package_version",
]
