
class FakeReceiveRequest:
    def __init__(self, requests):
        self._requests = list(requests)

    async def __call__(self):
        if not self._requests:
            return None
        return self._requests.pop(0)


class FakeSendResponse:
    def __init__(self):
        self.sent = []

    async def __call__(self, response):
        self.sent.append(response)
