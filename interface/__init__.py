"""Collaborator shells around the engine: REST API and terminal play."""
