"""
The Supervisor package.
Manages the lifecycle of the cluster's external processes.

This package contains the Process handle and its helper modules, which
together handle spawning, readiness detection and shutdown of a single
program, plus the ClusterManager which starts and stops whole clusters.
"""
from .stoppable import Startable, Stoppable
from .process import Process
from .supervisor import ClusterManager

__all__ = ['Process', 'Startable', 'Stoppable', 'ClusterManager']
