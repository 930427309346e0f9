"""
Domain Ports

Architectural Intent:
- Interfaces for the collaborators the deployment core delegates to
- Implemented by infrastructure adapters (Fabric, Meteor CLI)
"""

from pymup.domain.ports.builder_port import BuilderPort
from pymup.domain.ports.task_runner_port import TaskRunnerPort

__all__ = ["BuilderPort", "TaskRunnerPort"]
