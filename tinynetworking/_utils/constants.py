# Environment variables
ENV_TIMEOUT = "TINYNETWORKING_TIMEOUT"
ENV_FOLLOW_REDIRECTS = "TINYNETWORKING_FOLLOW_REDIRECTS"
ENV_DISABLE_SSL_VERIFY = "TINYNETWORKING_DISABLE_SSL_VERIFY"
ENV_MAX_WORKERS = "TINYNETWORKING_MAX_WORKERS"
ENV_DEBUG = "TINYNETWORKING_DEBUG"
ENV_SYSTEM_CERTS = "TINYNETWORKING_SYSTEM_CERTS"
ENV_SSL_CERT_FILE = "TINYNETWORKING_SSL_CERT_FILE"
ENV_SSL_CERT_DIR = "TINYNETWORKING_SSL_CERT_DIR"

# Standard CA locations, used when the variables above are unset
ENV_STANDARD_CERT_FILES = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")
ENV_STANDARD_CERT_DIR = "SSL_CERT_DIR"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

# Methods whose parameters are sent in the query string instead of the body
QUERY_PARAMETER_METHODS = frozenset({"GET", "HEAD", "DELETE"})
