"""Shared fixtures: a fake Nacos server on httpx.MockTransport and a stubbed KMS client."""
import hashlib
from urllib.parse import parse_qs

import boto3
import httpx
import pytest
from botocore.stub import Stubber

KMS_KEY_ARN = "arn:aws:kms:ap-southeast-1:123456789012:key/1234abcd-12ab-34cd-56ef-1234567890ab"

AUTO_MD5 = object()


class FakeNacosServer:
    """Answers the login and config endpoints of the Nacos open API."""

    def __init__(self):
        self.content = "{}"
        self.md5 = AUTO_MD5
        self.token = "test-token"
        self.login_status = 200
        self.config_status = 200
        self.require_token = False
        self.requests = []

    @property
    def login_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/v1/auth/login")]

    @property
    def config_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/v1/cs/configs")]

    def login_form(self, index=0):
        body = self.login_requests[index].content.decode()
        return {key: values[0] for key, values in parse_qs(body).items()}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path.endswith("/v1/auth/login"):
            if self.login_status != 200:
                return httpx.Response(self.login_status, text="unknown user!")
            return httpx.Response(
                200, json={"accessToken": self.token, "tokenTtl": 18000, "globalAdmin": False}
            )

        if request.url.path.endswith("/v1/cs/configs"):
            if self.require_token and request.url.params.get("accessToken") != self.token:
                return httpx.Response(403, text="user not found!")
            if self.config_status != 200:
                return httpx.Response(self.config_status, text="config data not exist")
            headers = {}
            if self.md5 is AUTO_MD5:
                headers["Content-MD5"] = hashlib.md5(self.content.encode("utf-8")).hexdigest()
            elif self.md5 is not None:
                headers["Content-MD5"] = self.md5
            return httpx.Response(200, text=self.content, headers=headers)

        return httpx.Response(404, text="no such endpoint")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def nacos_server():
    """Fixture for a fake Nacos server."""
    return FakeNacosServer()


@pytest.fixture
def base_env():
    """Complete set of connection variables, without KMS_KEY_ID."""
    return {
        "NACOS_ADDR": "http://nacos.test:8848",
        "NACOS_GROUP": "DEFAULT_GROUP",
        "NACOS_NAMESPACE": "dev",
        "NACOS_USERNAME": "nacos",
        "NACOS_PASSWORD": "plain-password",
        "NACOS_DATA_ID": "my-application",
    }


@pytest.fixture
def kms_env(base_env):
    env = dict(base_env)
    env["KMS_KEY_ID"] = KMS_KEY_ARN
    return env


@pytest.fixture
def kms_client():
    """boto3 KMS client with dummy credentials, never reaching AWS once stubbed."""
    return boto3.client(
        "kms",
        region_name="ap-southeast-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def kms_stub(kms_client):
    """Active Stubber for kms_client; queue responses with add_decrypt."""
    with Stubber(kms_client) as stubber:
        yield stubber


def add_decrypt(stubber: Stubber, ciphertext: bytes, plaintext: bytes, key_id: str = KMS_KEY_ARN) -> None:
    stubber.add_response(
        "decrypt",
        {"KeyId": key_id, "Plaintext": plaintext, "EncryptionAlgorithm": "SYMMETRIC_DEFAULT"},
        {"KeyId": key_id, "CiphertextBlob": ciphertext},
    )
