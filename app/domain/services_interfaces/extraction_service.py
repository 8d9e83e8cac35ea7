from abc import ABC, abstractmethod


class ExtractionServiceInterface(ABC):
    @abstractmethod
    async def extract(self, free_text: str) -> list[dict]:
        """
        Extracts multiple-choice questions from free-form text.

        The result is not validated: every item has the keys 'text', 'options' and
        'correct_option_index' with whatever the service produced for them.

        :param free_text: Text with questions, marked answers or just topics
        :return: List of question draft dictionaries
        """
        pass
