"""Rackspace Cloud Servers API client: identity auth plus compute v2 calls."""

import logging

import httpx

from hostdriver.errors import AuthenticationError, ProviderAPIError
from hostdriver.provisioning.types import ServerDetails, ServerSpec

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_URL = "https://identity.api.rackspacecloud.com/v2.0"
COMPUTE_SERVICE_TYPE = "compute"
COMPUTE_SERVICE_NAME = "cloudServersOpenStack"
REQUEST_TIMEOUT = 60


def _error_detail(resp):
    """Pull the human-readable message out of a compute/identity error body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip()
    if isinstance(body, dict):
        for value in body.values():
            if isinstance(value, dict) and "message" in value:
                return value["message"]
    return resp.text.strip()


def _json_body(resp, method, target):
    """Parse a 2xx JSON body. Anything else is a ProviderAPIError."""
    try:
        body = resp.json()
    except ValueError as e:
        raise ProviderAPIError(f"{method} {target} returned invalid JSON: {e}", status_code=resp.status_code) from e
    if not isinstance(body, dict):
        raise ProviderAPIError(f"{method} {target} returned unexpected JSON: {body!r}", status_code=resp.status_code)
    return body


def _find_compute_endpoint(catalog, region):
    """Return the publicURL of the compute endpoint for *region*, or None."""
    region = region.upper()
    services = [s for s in catalog if s.get("type") == COMPUTE_SERVICE_TYPE]
    # Prefer the OpenStack-based service over first-generation servers
    services.sort(key=lambda s: s.get("name") != COMPUTE_SERVICE_NAME)
    for service in services:
        for endpoint in service.get("endpoints", []):
            if endpoint.get("region", "").upper() == region:
                return endpoint.get("publicURL")
    return None


def authenticate(username, api_key, region, identity_url=DEFAULT_IDENTITY_URL, http=None):
    """Exchange account credentials for a token and a regional compute handle.

    POST {identity_url}/tokens with RAX-KSKEY API key credentials.

    Returns:
        ComputeClient bound to the compute endpoint of *region*.

    Raises:
        AuthenticationError if the credentials are rejected, ProviderAPIError
        for any other failure (including an unknown region).
    """
    logger.debug("Authenticating with your Rackspace credentials.")
    http = http or httpx.Client(timeout=REQUEST_TIMEOUT)
    payload = {
        "auth": {
            "RAX-KSKEY:apiKeyCredentials": {
                "username": username,
                "apiKey": api_key,
            }
        }
    }
    url = f"{identity_url.rstrip('/')}/tokens"
    try:
        resp = http.post(url, json=payload, headers={"Accept": "application/json"})
    except httpx.HTTPError as e:
        raise ProviderAPIError(f"POST {url} failed: {e}") from e

    if resp.status_code in (401, 403):
        raise AuthenticationError(f"Authentication failed for user '{username}': {_error_detail(resp)}")
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ProviderAPIError(
            f"POST {url} returned {resp.status_code}: {_error_detail(resp)}", status_code=resp.status_code
        ) from e

    access = _json_body(resp, "POST", url).get("access", {})
    token = access.get("token", {}).get("id")
    if not token:
        raise ProviderAPIError("Identity response did not include a token")

    endpoint = _find_compute_endpoint(access.get("serviceCatalog", []), region)
    if endpoint is None:
        raise ProviderAPIError(f"No compute endpoint found for region '{region}'")

    return ComputeClient(endpoint, token, http)


class ComputeClient:
    """Authenticated handle for the compute v2 API of one region."""

    def __init__(self, endpoint, token, http):
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.http = http

    def _request(self, method, path, data=None):
        """Make an authenticated compute API request.

        Returns:
            Parsed JSON body, or an empty dict for bodiless responses.
        """
        url = f"{self.endpoint}{path}"
        headers = {"X-Auth-Token": self.token, "Accept": "application/json"}
        try:
            resp = self.http.request(method, url, json=data, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderAPIError(f"{method} {path} failed: {e}") from e
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderAPIError(
                f"{method} {path} returned {resp.status_code}: {_error_detail(resp)}",
                status_code=resp.status_code,
            ) from e
        if not resp.content:
            return {}
        return _json_body(resp, method, path)

    def create_server(self, spec: ServerSpec) -> str:
        """POST /servers. Returns the provider-assigned server id."""
        data = {
            "server": {
                "name": spec.name,
                "imageRef": spec.image_id,
                "flavorRef": spec.flavor_id,
                "key_name": spec.key_pair_name,
                "OS-DCF:diskConfig": spec.disk_config,
            }
        }
        result = self._request("POST", "/servers", data)
        server_id = result.get("server", {}).get("id")
        if not server_id:
            raise ProviderAPIError("No server ID returned from create API")
        return server_id

    def get_server(self, server_id) -> ServerDetails:
        """GET /servers/{id}."""
        server = self._request("GET", f"/servers/{server_id}").get("server", {})
        return ServerDetails(
            id=server.get("id", server_id),
            status=server.get("status", ""),
            access_ipv4=server.get("accessIPv4", ""),
            name=server.get("name", ""),
        )

    def delete_server(self, server_id):
        """DELETE /servers/{id}."""
        self._request("DELETE", f"/servers/{server_id}")

    def reboot_server(self, server_id, mode="SOFT"):
        """POST /servers/{id}/action with a reboot of type *mode* (SOFT or HARD)."""
        self._request("POST", f"/servers/{server_id}/action", {"reboot": {"type": mode}})

    def create_keypair(self, name, public_key) -> str:
        """POST /os-keypairs. Returns the registered key pair name."""
        data = {"keypair": {"name": name, "public_key": public_key}}
        result = self._request("POST", "/os-keypairs", data)
        return result.get("keypair", {}).get("name", name)

    def delete_keypair(self, name):
        """DELETE /os-keypairs/{name}."""
        self._request("DELETE", f"/os-keypairs/{name}")
