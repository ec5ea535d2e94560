import importlib.util
import io
import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(__file__))

# boto3 clients are created at import time and need a region.
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

for _layer in ("common-utils", "mime-layer"):
    _path = os.path.join(ROOT, "common", "layers", _layer, "python")
    if _path not in sys.path:
        sys.path.insert(0, _path)

import boto3
from botocore.exceptions import ClientError


class DummyS3:
    def __init__(self):
        self.objects = {}
        self.requests = []

    def get_object(self, Bucket, Key):
        self.requests.append((Bucket, Key))
        if (Bucket, Key) not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
                "GetObject",
            )
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}


class DummySES:
    def __init__(self):
        self.sent = []
        self.fail_after = None

    def send_email(self, **kwargs):
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            raise ClientError(
                {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
                "SendEmail",
            )
        self.sent.append(kwargs)
        return {"MessageId": f"msg-{len(self.sent)}"}


@pytest.fixture
def s3_stub():
    return DummyS3()


@pytest.fixture
def ses_stub():
    return DummySES()


@pytest.fixture
def aws_clients(monkeypatch, s3_stub, ses_stub):
    clients = {"s3": s3_stub, "ses": ses_stub}
    monkeypatch.setattr(boto3, "client", lambda name, *a, **k: clients.get(name))
    return clients


@pytest.fixture(autouse=True)
def config(monkeypatch):
    import common_utils.get_ssm as g

    g._SSM_CACHE.clear()
    params = {"/parameters/aio/ameritasAI/SERVER_ENV": "dev"}
    monkeypatch.setattr(g, "get_values_from_ssm", lambda name, decrypt=False: params.get(name))
    for name in ("FORWARD_TO_ADDRESS", "MAX_MULTIPART_DEPTH", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    return params


@pytest.fixture
def load_lambda():
    def _load(name, path):
        spec = importlib.util.spec_from_file_location(name, os.path.join(ROOT, path))
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return _load
