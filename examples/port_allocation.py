"""Per-project database port allocation.

Each project gets a stable port from 3310-3399 so that several database
servers can run side by side. Allocations live in the caller's config under
Projects.PortRegistry.
"""

from mediaregistry import PortAllocator, PsutilPortProbe


config: dict = {}
allocator = PortAllocator(PsutilPortProbe())

# First allocation: lowest port that is neither allocated, reserved nor listening
port = allocator.allocate_for_config(config, "Wedding")
print(f"Wedding -> {port}")

# Same project again returns the same port without probing the OS
assert allocator.allocate_for_config(config, "Wedding") == port

# force=True picks a new port, e.g. when another program grabbed the old one
new_port = allocator.allocate_for_config(config, "Wedding", force=True)
print(f"Wedding moved to {new_port}")

for project, allocated in PortAllocator.list_allocations(
    config["Projects"]["PortRegistry"]
):
    print(f"{project}: {allocated}")
