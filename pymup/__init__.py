"""pymup: deploy a Meteor application bundle to remote hosts."""

__version__ = "0.1.0"
