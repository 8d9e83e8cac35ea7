from abc import ABC, abstractmethod


class AiohttpServiceInterface(ABC):
    @abstractmethod
    async def post(self, url: str, payload: dict, headers: dict = None) -> dict:
        """
        Sends an asynchronous POST request to the given URL with the provided payload.

        :param url: The URL to send the POST request to
        :param payload: The JSON payload to send in the POST request
        :param headers: Optional dictionary of headers to include in the request
        :return: The response in JSON format as a dictionary
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Closes the underlying client session.
        """
        pass
