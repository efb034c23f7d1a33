from models.document_models import DEFAULT_DOCUMENT_TITLE, Document
from services.document_service import DocumentService
from services.storage_service import StorageService


def _service(tmp_path):
    return DocumentService(StorageService(str(tmp_path)))


def test_load_without_saved_document_returns_none(tmp_path):
    assert _service(tmp_path).load_document() is None


def test_save_and_load_round_trip(tmp_path):
    service = _service(tmp_path)
    service.save_document(Document(title="Essay", body="<p>hello</p>"))

    loaded = _service(tmp_path).load_document()
    assert loaded.title == "Essay"
    assert loaded.body == "<p>hello</p>"


def test_missing_title_falls_back_to_default(tmp_path):
    storage = StorageService(str(tmp_path))
    storage.set_item(DocumentService.CONTENT_KEY, "<p>body</p>")
    loaded = DocumentService(storage).load_document()
    assert loaded.title == DEFAULT_DOCUMENT_TITLE


def test_new_document_is_empty(tmp_path):
    document = _service(tmp_path).new_document()
    assert document.title == DEFAULT_DOCUMENT_TITLE
    assert document.body == ""


def test_storage_tolerates_corrupt_file(tmp_path):
    """壊れた保存ファイルは空のストレージとして扱われる。"""
    storage = StorageService(str(tmp_path))
    with open(storage.get_path(StorageService.STORE_FILE_NAME), 'w', encoding='utf-8') as f:
        f.write("{not json")
    assert storage.get_item(DocumentService.CONTENT_KEY) is None
    storage.set_item("k", "v")
    storage.remove_item("k")
    assert storage.get_item("k") is None
