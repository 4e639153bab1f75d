"""Tests for duplicate resolution across overlapping exports."""

from importers import DuplicateResolver
from models import AttachmentInfo, DocumentInfo, ImportIndex

PAGE_ID = '42' + '0' * 30
CHILD_ID = 'b' * 32
SIBLING_ID = 'c' * 32


def snapshot(index):
    return (
        {doc_id: doc.to_dict() for doc_id, doc in index.documents.items()},
        {path: att.to_dict() for path, att in index.attachments.items()},
        dict(index.attachment_aliases)
    )


class TestDocumentDuplicates:
    """Test duplicate document resolution."""

    def test_larger_entry_is_retained(self):
        """Test the larger duplicate wins."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path=f'Page {PAGE_ID}.html',
                                        archive='part-1.zip', size=10))
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path=f'Page {PAGE_ID}.html',
                                        archive='part-2.zip', size=500))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['documents_merged'] == 1
        assert index.documents[PAGE_ID].size == 500
        assert index.documents[PAGE_ID].archive == 'part-2.zip'
        assert index.shadowed_documents == []

    def test_equal_size_prefers_smaller_origin(self):
        """Test equal sizes fall back to the smaller archive location."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path='b.html', archive='part-2.zip', size=10))
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path='a.html', archive='part-1.zip', size=10))

        DuplicateResolver().clean_duplicates(index)

        assert index.documents[PAGE_ID].origin == ('part-1.zip', 'a.html')

    def test_children_keep_pointing_at_retained_parent(self):
        """Test children follow the retained parent."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path='p.html', archive='part-1.zip', size=10))
        index.add_document(DocumentInfo(id=CHILD_ID, title='Child', path='c.html', parent_id=PAGE_ID))
        index.add_document(DocumentInfo(id=PAGE_ID, title='Page', path='p.html', archive='part-2.zip', size=500))

        DuplicateResolver().clean_duplicates(index)

        parent = index.documents[index.documents[CHILD_ID].parent_id]
        assert parent.archive == 'part-2.zip'

    def test_sibling_titles_disambiguated(self):
        """Test colliding sibling titles get an id suffix."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Root', path='r.html'))
        index.add_document(DocumentInfo(id=SIBLING_ID, title='Notes', path='n2.html', parent_id=PAGE_ID))
        index.add_document(DocumentInfo(id=CHILD_ID, title='notes', path='n1.html', parent_id=PAGE_ID))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['titles_disambiguated'] == 1
        assert index.documents[CHILD_ID].title == 'notes'
        assert index.documents[SIBLING_ID].title == f'Notes {SIBLING_ID[:8]}'

    def test_same_title_under_different_parents_is_kept(self):
        """Test equal titles under different parents are untouched."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Notes', path='n1.html'))
        index.add_document(DocumentInfo(id=CHILD_ID, title='Notes', path='n2.html', parent_id=PAGE_ID))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['titles_disambiguated'] == 0
        assert index.documents[CHILD_ID].title == 'Notes'

    def test_cycles_are_broken(self):
        """Test parent cycles are broken."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='A', path='a.html', parent_id=CHILD_ID))
        index.add_document(DocumentInfo(id=CHILD_ID, title='B', path='b.html', parent_id=PAGE_ID))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['cycles_broken'] == 1
        assert index.documents[PAGE_ID].parent_id is None


class TestAttachmentDuplicates:
    """Test duplicate attachment resolution."""

    def test_same_path_in_two_archives(self):
        """Test the same path in two archives keeps the larger file."""
        index = ImportIndex()
        index.add_attachment(AttachmentInfo(path='Page/photo.png', name='photo.png', archive='part-1.zip', size=5))
        index.add_attachment(AttachmentInfo(path='Page/photo.png', name='photo.png', archive='part-2.zip', size=50))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['attachments_merged'] == 1
        assert index.attachments['Page/photo.png'].archive == 'part-2.zip'
        assert index.shadowed_attachments == []

    def test_copy_marker_duplicate_is_aliased(self):
        """Test a copy-marked duplicate is aliased to the retained file."""
        index = ImportIndex()
        index.add_attachment(AttachmentInfo(path='Page/photo (1).png', name='photo (1).png',
                                            owner_id=PAGE_ID, size=5))
        index.add_attachment(AttachmentInfo(path='Page/photo.png', name='photo.png',
                                            owner_id=PAGE_ID, size=500))

        DuplicateResolver().clean_duplicates(index)

        assert list(index.attachments) == ['Page/photo.png']
        assert index.attachment_aliases == {'Page/photo (1).png': 'Page/photo.png'}
        assert index.resolve_attachment('Page/photo (1).png').path == 'Page/photo.png'

    def test_different_owners_are_not_duplicates(self):
        """Test same-named files of different pages are kept."""
        index = ImportIndex()
        index.add_attachment(AttachmentInfo(path='A/photo.png', name='photo.png', owner_id=PAGE_ID))
        index.add_attachment(AttachmentInfo(path='B/photo.png', name='photo.png', owner_id=CHILD_ID))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['attachments_merged'] == 0
        assert len(index.attachments) == 2

    def test_ownerless_files_in_different_folders_are_kept(self):
        """Test same-named files without an owner in separate folders are not merged."""
        index = ImportIndex()
        index.add_attachment(AttachmentInfo(path='misc/a/notes.txt', name='notes.txt', size=4))
        index.add_attachment(AttachmentInfo(path='misc/b/notes.txt', name='notes.txt', size=8))

        stats = DuplicateResolver().clean_duplicates(index)

        assert stats['attachments_merged'] == 0
        assert sorted(index.attachments) == ['misc/a/notes.txt', 'misc/b/notes.txt']
        assert index.attachment_aliases == {}

    def test_ownerless_copy_in_same_folder_is_aliased(self):
        """Test a copy-marked file without an owner merges with its twin in the same folder."""
        index = ImportIndex()
        index.add_attachment(AttachmentInfo(path='misc/notes (1).txt', name='notes (1).txt', size=4))
        index.add_attachment(AttachmentInfo(path='misc/notes.txt', name='notes.txt', size=8))

        DuplicateResolver().clean_duplicates(index)

        assert index.attachment_aliases == {'misc/notes (1).txt': 'misc/notes.txt'}


class TestIdempotence:
    """Test repeated duplicate resolution."""

    def test_second_run_changes_nothing(self):
        """Test a second run leaves the index unchanged."""
        index = ImportIndex()
        index.add_document(DocumentInfo(id=PAGE_ID, title='Root', path='r.html', archive='part-1.zip', size=10))
        index.add_document(DocumentInfo(id=PAGE_ID, title='Root', path='r.html', archive='part-2.zip', size=500))
        index.add_document(DocumentInfo(id=SIBLING_ID, title='Notes', path='n2.html', parent_id=PAGE_ID))
        index.add_document(DocumentInfo(id=CHILD_ID, title='Notes', path='n1.html', parent_id=PAGE_ID))
        index.add_attachment(AttachmentInfo(path='r/img (1).png', name='img (1).png', owner_id=PAGE_ID, size=1))
        index.add_attachment(AttachmentInfo(path='r/img.png', name='img.png', owner_id=PAGE_ID, size=9))

        resolver = DuplicateResolver()
        resolver.clean_duplicates(index)
        first = snapshot(index)

        stats = resolver.clean_duplicates(index)

        assert snapshot(index) == first
        assert stats['documents_merged'] == 0
        assert stats['attachments_merged'] == 0
        assert stats['cycles_broken'] == 0
