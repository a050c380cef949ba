import json
import unittest

import httpx

from application.dispatcher import Dispatcher
from application.identity import UserIdentityProvider
from application.remote_operations import RemoteOperationClient
from application.tokens import TokenAcquirer
from domain.errors import RemoteOperationError, TokenRejectedError, TransportError
from domain.models import Credentials, IncomingMessage, Intent
from infrastructure.cache.token_cache import InMemoryTokenCache
from infrastructure.graphql.client import GraphQLApiClient

API_URL = "https://api.example.test/graphql"


class InMemoryBotUserRepository:
    def __init__(self):
        self.users = {}

    def get_by_handle(self, handle):
        return self.users.get(handle)

    def add_user(self, user) -> None:
        self.users.setdefault(user.handle, user)

    def update_last_intent(self, handle, intent) -> None:
        self.users[handle].last_intent = intent


class GraphQLApiClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.requests = []
        self.responder = lambda request: httpx.Response(200, json={"data": {}})

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.responder(request)

        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        self.client = GraphQLApiClient(API_URL, http_client=http_client)

    def tearDown(self) -> None:
        self.client.close()

    def respond_with(self, field, value):
        self.responder = lambda request: httpx.Response(200, json={"data": {field: value}})

    def sent_body(self, index=-1):
        return json.loads(self.requests[index].content)

    def test_sign_in_is_unauthenticated_and_maps_token(self):
        self.respond_with(
            "signIn",
            {"accessToken": "abc", "refreshToken": "def", "expiresIn": 3600},
        )
        payload = self.client.sign_in(Credentials("alice@kbot.com", "pw"))

        self.assertEqual(payload.access_token, "abc")
        self.assertEqual(payload.refresh_token, "def")
        self.assertEqual(payload.expires_in, 3600)
        self.assertIsNone(payload.error)
        request = self.requests[-1]
        self.assertNotIn("authorization", request.headers)
        self.assertEqual(str(request.url), API_URL)
        self.assertEqual(
            self.sent_body()["variables"],
            {"credentials": {"email": "alice@kbot.com", "password": "pw"}},
        )
        self.assertIn("signIn", self.sent_body()["query"])

    def test_sign_up_error_arm(self):
        self.respond_with("signUp", {"error": "Email already registered"})
        payload = self.client.sign_up(Credentials("alice@kbot.com", "pw"))
        self.assertIsNone(payload.access_token)
        self.assertEqual(payload.error, "Email already registered")

    def test_add_word_sends_bearer_token_and_input(self):
        self.respond_with("addWord", {"message": "Added"})
        response = self.client.add_word("tok", "apple", "μήλο")

        self.assertEqual(response.message, "Added")
        self.assertEqual(self.requests[-1].headers["authorization"], "Bearer tok")
        self.assertEqual(
            self.sent_body()["variables"],
            {"newWord": {"word": "apple", "translation": "μήλο"}},
        )

    def test_operations_without_variables_omit_them(self):
        self.respond_with("stopTraining", {"message": "Stopped"})
        self.client.stop_training("tok")
        self.assertNotIn("variables", self.sent_body())

    def test_training_session_arms(self):
        self.respond_with("startTraining", {"word": "σκύλος", "completed": 2, "total": 5})
        session = self.client.start_training("tok")
        self.assertEqual((session.word, session.completed, session.total), ("σκύλος", 2, 5))
        self.assertIsNone(session.message)

        self.respond_with("submitAnswer", {"message": "Training completed"})
        session = self.client.submit_answer("tok", "dog")
        self.assertIsNone(session.word)
        self.assertEqual(session.message, "Training completed")
        self.assertEqual(self.sent_body()["variables"], {"answer": "dog"})

    def test_translation_and_random_word(self):
        self.respond_with("getTranslation", {"error": "Not found"})
        self.assertEqual(self.client.get_translation("tok", "σκύλος").error, "Not found")

        self.respond_with("getRandomTranslation", "γάτα - cat")
        self.assertEqual(self.client.get_random_translation("tok"), "γάτα - cat")

        self.respond_with("getRandomTranslation", None)
        self.assertIsNone(self.client.get_random_translation("tok"))

    def test_graphql_errors_raise_remote_operation_error(self):
        self.responder = lambda request: httpx.Response(
            200, json={"errors": [{"message": "Validation error"}], "data": None}
        )
        with self.assertRaises(RemoteOperationError) as ctx:
            self.client.get_translation("tok", "x")
        self.assertEqual(str(ctx.exception), "Validation error")
        self.assertEqual(ctx.exception.operation, "getTranslation")

    def test_plain_string_errors_raise_remote_operation_error(self):
        self.responder = lambda request: httpx.Response(200, json={"errors": ["boom"]})
        with self.assertRaises(RemoteOperationError) as ctx:
            self.client.add_word("tok", "cat")
        self.assertEqual(str(ctx.exception), "boom")

    def test_non_object_body_raises_transport_error(self):
        self.responder = lambda request: httpx.Response(200, json=[])
        with self.assertRaises(TransportError):
            self.client.get_random_translation("tok")

    def test_non_object_data_raises_transport_error(self):
        self.responder = lambda request: httpx.Response(200, json={"data": "oops"})
        with self.assertRaises(TransportError):
            self.client.start_training("tok")

    def test_non_object_field_maps_to_empty_result(self):
        self.respond_with("addWord", "unexpected")
        response = self.client.add_word("tok", "cat")
        self.assertIsNone(response.message)
        self.assertIsNone(response.error)

    def test_malformed_body_still_moves_user_state(self):
        self.responder = lambda request: httpx.Response(200, json=[])
        user_repo = InMemoryBotUserRepository()
        identity = UserIdentityProvider(user_repo)
        cache = InMemoryTokenCache(ttl_seconds=60)
        cache.put("alice", "tok")
        tokens = TokenAcquirer(cache, identity, self.client)
        dispatcher = Dispatcher(user_repo, identity, tokens, RemoteOperationClient(self.client, tokens))

        reply = dispatcher.handle_message(IncomingMessage(1, "alice", "/random"))
        self.assertIn("Please try again later", reply.text)
        self.assertEqual(user_repo.get_by_handle("alice").last_intent, Intent.GET_RANDOM_WORD)

    def test_unauthorized_raises_token_rejected(self):
        self.responder = lambda request: httpx.Response(401)
        with self.assertRaises(TokenRejectedError) as ctx:
            self.client.start_training("tok")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_server_error_raises_transport_error(self):
        self.responder = lambda request: httpx.Response(502, text="Bad gateway")
        with self.assertRaises(TransportError) as ctx:
            self.client.stop_training("tok")
        self.assertEqual(ctx.exception.status_code, 502)
        self.assertNotIsInstance(ctx.exception, TokenRejectedError)

    def test_invalid_json_raises_transport_error(self):
        self.responder = lambda request: httpx.Response(200, text="<html>")
        with self.assertRaises(TransportError):
            self.client.stop_training("tok")

    def test_network_failure_raises_transport_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        self.responder = fail
        with self.assertRaises(TransportError) as ctx:
            self.client.sign_in(Credentials("a@kbot.com", "pw"))
        self.assertEqual(ctx.exception.operation, "signIn")


if __name__ == "__main__":
    unittest.main()
