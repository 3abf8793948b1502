import os

# The mlrest logger does not propagate once configured, which would hide its records from the
# `caplog` fixture.
os.environ.setdefault("MLREST_CONFIGURE_LOGGING", "false")
