"""
Tests for the seed-content command.
"""
import unittest
import sys
import os
import json
import tempfile

# Add parent directory to path to import conand modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from conand import create_app
from conand.models.content_store import ContentStore
from conand.utils.seed import SEED_FILE, seed_content


class TestSeedContent(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.target = os.path.join(self.tmpdir.name, 'nested', 'content.json')
        self.app = create_app()
        self.app.config['TESTING'] = True
        self.app.config['CONTENT_FILE'] = self.target
        self.runner = self.app.test_cli_runner()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_seed_document_is_complete(self):
        store = ContentStore(SEED_FILE)
        status = store.status()
        self.assertTrue(status['available'])
        self.assertEqual(status['counts']['events'], 3)
        self.assertEqual(status['counts']['sponsors'], 17)
        upcoming = store.find('events', where={'status': 'upcoming'})
        self.assertEqual([e['slug'] for e in upcoming], ['devfest'])

    def test_seed_references_resolve(self):
        with open(SEED_FILE, 'r', encoding='utf-8') as f:
            data = json.load(f)
        ids = {name: {d['id'] for d in data[name]} for name in ('media', 'speakers', 'sponsors')}
        for event in data['events']:
            self.assertIn(event['featuredImage'], ids['media'])
            for speaker in event['speakers']:
                self.assertIn(speaker, ids['speakers'])
            for item in event['eventSponsors']:
                self.assertIn(item['sponsor'], ids['sponsors'])
            for session in event['schedule']['sessions']:
                if 'sessionSpeaker' in session:
                    self.assertIn(session['sessionSpeaker'], ids['speakers'])

    def test_seed_function(self):
        path = seed_content(self.target)
        self.assertTrue(os.path.exists(path))
        with self.assertRaises(FileExistsError):
            seed_content(self.target)
        seed_content(self.target, force=True)

    def test_cli(self):
        result = self.runner.invoke(args=['seed-content'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('Seeded content', result.output)
        self.assertTrue(os.path.exists(self.target))

    def test_cli_refuses_to_overwrite(self):
        self.runner.invoke(args=['seed-content'])
        result = self.runner.invoke(args=['seed-content'])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn('already exists', result.output)

    def test_cli_force(self):
        self.runner.invoke(args=['seed-content'])
        result = self.runner.invoke(args=['seed-content', '--force'])
        self.assertEqual(result.exit_code, 0, result.output)


if __name__ == '__main__':
    unittest.main()
