"""Key-value stores implementing the KeyValueStore interface.

MemoryStore keeps records in a dict for the lifetime of the process;
DiskStore persists them with diskcache and backs the default store.
"""
