"""Internal constants shared across the library."""

BASE_URL = "https://housesigma.com"
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0 Safari/537.36"

TOKEN_ENDPOINT = "/bkv2/api/init/accesstoken/new"
MAP_SEARCH_ENDPOINT = "/bkv2/api/search/mapsearchv3/listing"
PREVIEW_MANY_ENDPOINT = "/bkv2/api/listing/preview/many"

# ------------------------------------------------------------------
# Encrypted payload protocol
# ------------------------------------------------------------------

#: Field merged into every encrypted request body.
TIMESTAMP_FIELD = "hs_request_timestamp"
#: Header carrying the same timestamp alongside the encrypted body.
TIMESTAMP_HEADER = "HS-Request-Timestamp"

AES_KEY_SIZE = 16
COUNTER_SIZE = 16
#: Right-padding byte for short secrets; must match the server.
KEY_PAD_BYTE = b"*"

# Published key of the listing service (RSA-1024, SubjectPublicKeyInfo).
DEFAULT_RSA_PUBLIC_KEY_PEM = """-----BEGIN PUBLIC KEY-----
MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQDQlOcjEbqprurl2xjoEP0QdjGI
rZhLVn5vzwCorG4+2AtSi4AAHjghSXM//ljqE5rA13gfTc58JvM6I75Dmqr5r5Vv
o57CAbxBXHsXu5ojtgvb5rOd2lrZeckwJL0Z7euvRsA/FjbFdGMcGeSJ8JoePq+H
0RFOt285bSb8hVq0LQIDAQAB
-----END PUBLIC KEY-----
"""
