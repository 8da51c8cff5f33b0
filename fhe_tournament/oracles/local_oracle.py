"""
Local committee oracle.

In-process stand-in for the external decryption oracle. Requests return an
id immediately; decryption and committee signing run on a thread pool and
the result is posted to a CallbackInbox, possibly out of order.
"""

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from types import TracebackType

from typing_extensions import override

from ..codec import encode_cleartext
from ..encryption.paillier_backend import PaillierDecryptor
from ..exceptions import InvalidRequest
from ..interfaces import DecryptionOracle, EncryptedValue
from ..logging_config import get_logger
from ..models import DecryptionResult
from .committee import Committee, CommitteeMember, CommitteeProof
from .inbox import CallbackInbox

# Rewrites a cleartext after it was signed; used to simulate forged results
Tamper = Callable[[int, bytes], bytes]


class LocalCommitteeOracle(DecryptionOracle):
    """
    Oracle holding the Paillier private key and the committee signing keys.

    With auto_fulfil=False nothing is decrypted until fulfil() is called,
    which lets callers control callback ordering.
    """

    def __init__(
        self,
        decryptor: PaillierDecryptor,
        committee: Committee,
        members: Sequence[CommitteeMember],
        inbox: CallbackInbox,
        max_workers: int = 4,
        auto_fulfil: bool = True,
    ):
        self.decryptor: PaillierDecryptor = decryptor
        self.committee: Committee = committee
        self.members: list[CommitteeMember] = list(members)
        self.inbox: CallbackInbox = inbox
        self.tamper: Tamper | None = None

        self._lock: threading.Lock = threading.Lock()
        self._next_request_id: int = 1
        # Unanswered requests only; entries are dropped once their result is posted
        self._jobs = dict[int, tuple[list[EncryptedValue], str]]()
        self._futures = dict[int, Future[DecryptionResult]]()
        self._executor: ThreadPoolExecutor | None = (
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="oracle")
            if auto_fulfil
            else None
        )
        self.logger = get_logger("local_oracle")

    @override
    def request_decryption(self, handles: Sequence[EncryptedValue], callback_id: str) -> int:
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._jobs[request_id] = (list(handles), callback_id)
            if self._executor is not None:
                self._futures[request_id] = self._executor.submit(self.fulfil, request_id)
        self.logger.debug(f"Request {request_id}: {len(handles)} handle(s) for {callback_id}")
        return request_id

    def fulfil(self, request_id: int) -> DecryptionResult:
        """Decrypt, attest and post the result for one request."""
        with self._lock:
            if request_id not in self._jobs:
                raise InvalidRequest(f"Oracle has no request {request_id}")
            handles, callback_id = self._jobs[request_id]

        cleartext = encode_cleartext([self.decryptor.decrypt(h) for h in handles])
        proof = Committee.attest(self.members, request_id, cleartext)
        if self.tamper is not None:
            cleartext = self.tamper(request_id, cleartext)

        result = DecryptionResult(
            request_id=request_id, callback_id=callback_id, cleartext=cleartext, proof=proof
        )
        self.inbox.put(result)
        with self._lock:
            _ = self._jobs.pop(request_id, None)
            _ = self._futures.pop(request_id, None)
        self.logger.debug(f"Request {request_id} fulfilled")
        return result

    @override
    def check_proof(self, request_id: int, cleartext: bytes, proof: CommitteeProof) -> bool:
        return self.committee.verify(request_id, cleartext, proof)

    def pending(self) -> list[int]:
        """Requests not yet answered."""
        with self._lock:
            return sorted(self._jobs)

    def wait(self, timeout: float | None = None) -> None:
        """Block until every outstanding decryption finished; re-raises worker errors."""
        with self._lock:
            futures = list(self._futures.values())
        _ = wait(futures, timeout=timeout)
        for future in futures:
            if future.done():
                _ = future.result()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "LocalCommitteeOracle":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
