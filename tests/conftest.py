"""Shared fixtures: sample triple files, change documents and a fake S3 client.

DBPedia IRIs use the 28-character resource prefix, IMDB IRIs the
16-character "http://imdb.org/" prefix, matching the loader defaults.
"""
import io
import json

import pytest
from botocore.exceptions import ClientError

from deltagraph.graph import TypedGraph
from deltagraph.models import LoadingSchema

DBR = "http://dbpedia.org/resource/"
DBO = "http://dbpedia.org/ontology/"
IMDB = "http://imdb.org/"


TYPES_NT = f"""\
<{DBR}Alice> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <{DBO}Person> .
<{DBR}Bob> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <{DBO}Person> .
<{DBR}Bob> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <{DBO}Athlete> .
<{DBR}Paris> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <{DBO}City> .
"""

DATA_NT = f"""\
<{DBR}Alice> <{DBO}knows> <{DBR}Bob> .
<{DBR}Alice> <{DBO}birthPlace> <{DBR}Paris> .
<{DBR}Alice> <{DBO}name> "Alice" .
<{DBR}Bob> <{DBO}sameAs> <{DBR}Bob> .
<{DBR}Bob> <{DBO}spouse> <{DBR}Carol> .
<{DBR}Dave> <{DBO}knows> <{DBR}Alice> .
"""

IMDB_NT = f"""\
<{IMDB}actor/nm1> <{IMDB}actedIn> <{IMDB}movie/tt1> .
<{IMDB}actor/nm2> <{IMDB}actedIn> <{IMDB}movie/tt1> .
<{IMDB}director/nm1> <{IMDB}directed> <{IMDB}movie/tt2> .
<{IMDB}movie/tt1> <{IMDB}title> "Heat" .
<{IMDB}movie/tt1/extra> <{IMDB}related> <{IMDB}movie/tt2> .
"""


class TrackingBytesIO(io.BytesIO):
    """BytesIO that remembers it was closed, even after close() wipes state."""

    def __init__(self, data=b""):
        super().__init__(data)
        self.was_closed = False

    def close(self):
        self.was_closed = True
        super().close()


class FakeS3Client:
    """Minimal stand-in for a boto3 S3 client: get_object over a dict."""

    def __init__(self, objects):
        self.objects = objects
        self.requests = []
        self.bodies = []

    def get_object(self, Bucket, Key):
        self.requests.append((Bucket, Key))
        if (Bucket, Key) not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
                "GetObject",
            )
        body = TrackingBytesIO(self.objects[(Bucket, Key)])
        self.bodies.append(body)
        return {"Body": body}


class StubResolver:
    """Resolver handing out tracked in-memory streams keyed by path."""

    def __init__(self, contents):
        self.contents = contents
        self.opened = []

    def open(self, path):
        stream = TrackingBytesIO(self.contents[path])
        self.opened.append(stream)
        return stream


def change_documents():
    return [
        {"typeOfChange": "insertEdge", "src": "alice", "dst": "bob", "label": "knows"},
        {"typeOfChange": "deleteEdge", "src": "alice", "dst": "paris", "label": "birthplace"},
        {
            "typeOfChange": "changeAttr",
            "uri": "alice",
            "attribute": {"attrName": "name", "attrValue": "alicia"},
        },
        {
            "typeOfChange": "insertAttr",
            "uri": "bob",
            "attribute": {"attrName": "height", "attrValue": "180"},
        },
        {
            "typeOfChange": "deleteAttr",
            "uri": "alice",
            "attribute": {"attrName": "name", "attrValue": "alicia"},
        },
        {
            "typeOfChange": "insertVertex",
            "vertex": {
                "vertexURI": "carol",
                "types": ["person", "scientist"],
                "allAttributesList": [
                    {"attrName": "name", "attrValue": "carol"},
                    {"attrName": "field", "attrValue": "chemistry"},
                ],
            },
        },
        {
            "typeOfChange": "deleteVertex",
            "vertex": {"vertexURI": "paris", "types": ["city"], "allAttributesList": []},
        },
    ]


@pytest.fixture
def graph():
    return TypedGraph()


@pytest.fixture
def dbpedia_files(tmp_path):
    types_path = tmp_path / "types.nt"
    data_path = tmp_path / "data.nt"
    types_path.write_text(TYPES_NT, encoding="utf-8")
    data_path.write_text(DATA_NT, encoding="utf-8")
    return str(types_path), str(data_path)


@pytest.fixture
def imdb_file(tmp_path):
    path = tmp_path / "imdb.nt"
    path.write_text(IMDB_NT, encoding="utf-8")
    return str(path)


@pytest.fixture
def changes_file(tmp_path):
    path = tmp_path / "changes.json"
    path.write_text(json.dumps(change_documents()), encoding="utf-8")
    return str(path)


@pytest.fixture
def person_schema():
    return LoadingSchema.build(types=["person"], attributes=["name"], optimized=True)
