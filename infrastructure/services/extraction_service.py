from app.domain.services_interfaces.aiohttp_service import AiohttpServiceInterface
from app.domain.services_interfaces.extraction_service import ExtractionServiceInterface
from app.domain.exceptions import ExtractionError
from config.main_config import EXTRACTION_API_URL, EXTRACTION_MODEL, OPENAI_API_KEY
import aiohttp
import json
import logging


logger = logging.getLogger('external_apis')

SYSTEM_PROMPT = '''You are a question formatter for a university course.

Your job is to take free-form text and extract/standardize ALL multiple-choice questions found in it into a JSON array.

Rules:
- Extract EVERY question you can identify from the text.
- Keep the language of the input text.
- Preserve the EXACT number of options each question has. Do NOT add or remove options. Only when generating new questions from topics or concepts, default to 4.
- One option must be correct (correctAnswerIndex is 0-based).
- When the text provides existing questions with marked answers, keep ALL original options and their order and set correctAnswerIndex to the marked answer.
- When generating NEW questions from topics, randomize the correct answer position.
- Fix typos and grammar, but do NOT restructure or drop any options.
- If only one question is found, still return it as an array with one element.

Output ONLY a JSON array (no explanation, no markdown, no wrapping text). Example element:
{"question": "...", "options": ["...", "...", "...", "..."], "correctAnswerIndex": 1}'''


class OpenAIExtractionService(ExtractionServiceInterface):
    def __init__(self, aiohttp_service: AiohttpServiceInterface,
                 api_url: str = EXTRACTION_API_URL,
                 model: str = EXTRACTION_MODEL,
                 api_key: str = OPENAI_API_KEY):
        self.aiohttp_service = aiohttp_service
        self.api_url = api_url
        self.model = model
        self.api_key = api_key

    @staticmethod
    def _parse(content: str) -> list[dict]:
        """
        Parses the JSON array from the model reply.

        Models sometimes wrap the array into markdown or a sentence, so only the span
        between the first '[' and the last ']' is parsed.

        :param content: Text content of the model reply.
        :return: List of question draft dictionaries.
        """
        start = content.find('[')
        end = content.rfind(']')
        if start == -1 or end < start:
            raise ExtractionError(f"No JSON array in the reply: {content[:200]!r}")
        try:
            items = json.loads(content[start:end + 1])
        except json.JSONDecodeError as e:
            raise ExtractionError(f"Reply is not valid JSON: {e}") from e

        drafts = []
        for item in items:
            if not isinstance(item, dict):
                raise ExtractionError(f"Unexpected item in the reply: {item!r}")
            drafts.append({
                'text': item.get('question'),
                'options': item.get('options'),
                'correct_option_index': item.get('correctAnswerIndex'),
            })
        return drafts

    async def extract(self, free_text: str) -> list[dict]:
        if not free_text or not free_text.strip():
            raise ExtractionError("Missing text to extract questions from")
        if not self.api_key:
            raise ExtractionError("API key for the extraction service is not configured")

        payload = {
            'model': self.model,
            'messages': [{'role': 'system', 'content': SYSTEM_PROMPT},
                         {'role': 'user', 'content': free_text}],
            'temperature': 0.3,
            'max_tokens': 10000,
        }
        headers = {'Authorization': f'Bearer {self.api_key}'}
        try:
            response = await self.aiohttp_service.post(self.api_url, payload, headers=headers)
        except aiohttp.ClientError as e:
            logger.error(f"Extraction request failed: {e}", exc_info=True)
            raise ExtractionError(f"Extraction request failed: {e}") from e

        try:
            content = response['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise ExtractionError(f"Unexpected reply structure: {response!r}") from e

        drafts = self._parse(content)
        logger.info(f"Extracted {len(drafts)} question drafts")
        return drafts
