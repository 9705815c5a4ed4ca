"""
Mirror Cache: bare mirror clones of every source repository.

Each repository gets one `<name>.git` directory under the backup
directory, cloned once and refreshed incrementally on later runs.
"""
