"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
ZIP format constants: record signatures, placeholder sentinels, fixed record
sizes and the few flags the extractor looks at.
"""

# ZIP record signatures (magic numbers)
LOCAL_FILE_HEADER = 0x04034B50  # "PK\x03\x04"
CENTRAL_DIR_HEADER = 0x02014B50  # "PK\x01\x02"
END_OF_CENTRAL_DIR = 0x06054B50  # "PK\x05\x06"
ZIP64_END_OF_CENTRAL_DIR = 0x06064B50  # "PK\x06\x06"
ZIP64_END_OF_CENTRAL_DIR_LOCATOR = 0x07064B50  # "PK\x06\x07"

SIGNATURE_SIZE = 4

# Compression method
COMP_DEFLATE = 8

# General purpose bit flags
FLAG_ENCRYPTED = 0x0001
FLAG_DATA_DESCRIPTOR = 0x0008

# Placeholder values that defer to the ZIP64 extra field
SENTINEL_16 = 0xFFFF
SENTINEL_32 = 0xFFFFFFFF

# ZIP64 extra field tag
ZIP64_EXTRA_FIELD_TAG = 0x0001

# Extra field header: id (u16) + size (u16)
EXTRA_FIELD_HEADER_SIZE = 4

# Fixed record sizes, signature included
END_OF_CENTRAL_DIR_SIZE = 22
ZIP64_LOCATOR_SIZE = 20

# Locator body without its signature
ZIP64_LOCATOR_BODY_SIZE = ZIP64_LOCATOR_SIZE - SIGNATURE_SIZE

# Read/write granularity of the entry decompressor
CHUNK_SIZE = 1024 * 1024
