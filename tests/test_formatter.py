import unittest

from cv_analyzer.formatting import (
    COMPLETED_RESULT_HTML,
    EMPTY_RESULT_HTML,
    format_analysis,
    render_inline,
)


class FormatterPlaceholderTests(unittest.TestCase):
    def test_empty_and_blank_inputs_return_placeholder(self):
        for value in (None, "", "   ", "\n\n\t\n"):
            self.assertEqual(format_analysis(value), EMPTY_RESULT_HTML)

    def test_only_dropped_lines_still_yield_fragment(self):
        self.assertEqual(format_analysis("✅ After: orphan rewrite"), COMPLETED_RESULT_HTML)


class FormatterEscapingTests(unittest.TestCase):
    def test_script_tags_are_escaped(self):
        html = format_analysis("<script>alert('x')</script> & more")
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;alert('x')&lt;/script&gt; &amp; more", html)

    def test_escaping_applies_inside_structural_blocks(self):
        text = "## <b>Title</b>\n- <img src=x>\nPriority: 🔴\n- Problem: a < b"
        html = format_analysis(text)
        self.assertNotIn("<b>", html)
        self.assertNotIn("<img", html)
        self.assertIn("<h2>&lt;b&gt;Title&lt;/b&gt;</h2>", html)
        self.assertIn("a &lt; b", html)

    def test_output_is_deterministic(self):
        text = "1. Overview\nPriority: 🟡\n- Problem: X\n\n- a\n- b\n❌ Before: x\n✅ After: y"
        self.assertEqual(format_analysis(text), format_analysis(text))


class FormatterStructureTests(unittest.TestCase):
    def test_markdown_header_followed_by_paragraph(self):
        html = format_analysis("## Title\n\nBody text")
        self.assertEqual(html, "<h2>Title</h2>\n<p>Body text</p>")

    def test_level_three_header(self):
        self.assertEqual(format_analysis("### Skills"), "<h3>Skills</h3>")

    def test_numbered_section_header(self):
        html = format_analysis("1. ATS Score\nYour CV scores **72/100**.")
        self.assertIn('<h2 class="section-header">1. ATS Score</h2>', html)
        self.assertIn("<p>Your CV scores <strong>72/100</strong>.</p>", html)

    def test_numbered_section_header_with_bold_title(self):
        html = format_analysis("1. **ATS Score**\n2. *Keywords*\n3. **weak verbs**")
        self.assertIn('<h2 class="section-header">1. <strong>ATS Score</strong></h2>', html)
        self.assertIn('<h2 class="section-header">2. <em>Keywords</em></h2>', html)
        self.assertIn("<ol><li><strong>weak verbs</strong></li></ol>", html)

    def test_priority_block_groups_entries_in_order(self):
        html = format_analysis("Priority: 🔴\n- Problem: X\n- Impact: Y\n- Solution: Z")
        self.assertEqual(html.count('<div class="priority-item critical">'), 1)
        problem = html.index("Problem:")
        impact = html.index("Impact:")
        solution = html.index("Solution:")
        self.assertLess(problem, impact)
        self.assertLess(impact, solution)
        self.assertEqual(html.count('class="priority-entry"'), 3)
        self.assertTrue(html.endswith("</div>"))
        self.assertNotIn("<li>", html)

    def test_priority_severity_classes(self):
        self.assertIn('priority-item important', format_analysis("Priority: 🟡\n- Problem: a"))
        self.assertIn('priority-item optional', format_analysis("Priority: 🟢 Nice to have\n- Problem: a"))
        self.assertIn("🟢 Nice to have", format_analysis("Priority: 🟢 Nice to have"))

    def test_blank_line_closes_priority_block(self):
        html = format_analysis("Priority: 🔴\n- Problem: X\n\n- Impact: Y")
        block_end = html.index("</div>\n")
        self.assertLess(html.index("Problem:"), block_end)
        self.assertGreater(html.index("Impact:"), block_end)

    def test_labeled_entry_outside_block_is_not_a_bullet(self):
        html = format_analysis("- Problem: stray")
        self.assertNotIn("<li>", html)
        self.assertIn('class="priority-entry"', html)

    def test_before_after_block(self):
        html = format_analysis("❌ Before: old\n✅ After: new\nWhy this is better: clearer")
        self.assertTrue(html.startswith('<div class="before-after">'))
        self.assertEqual(html.count('<div class="before-after">'), 1)
        before = html.index('class="before"')
        after = html.index('class="after"')
        why = html.index('class="why-better"')
        self.assertLess(before, after)
        self.assertLess(after, why)
        self.assertIn("clearer</div></div>", html)

    def test_why_line_without_after_is_paragraph(self):
        html = format_analysis("❌ Before: old\nWhy this is better: clearer")
        self.assertIn("<p>Why this is better: clearer</p>", html)
        self.assertNotIn("why-better", html)

    def test_after_without_before_is_dropped(self):
        html = format_analysis("Intro\n✅ After: orphan")
        self.assertEqual(html, "<p>Intro</p>")

    def test_feedback_items(self):
        text = "- ✅ What Works: Clear layout\n- ❌ What Doesn't: No metrics\n- 🔧 How to Fix: Add numbers"
        html = format_analysis(text)
        self.assertIn('class="feedback-item works"', html)
        self.assertIn('class="feedback-item doesnt"', html)
        self.assertIn('class="feedback-item fix"', html)
        self.assertNotIn("<ul>", html)

    def test_bullets_wrapped_in_single_list(self):
        html = format_analysis("- a\n- b\n- c")
        self.assertEqual(html, "<ul><li>a</li><li>b</li><li>c</li></ul>")

    def test_blank_line_splits_lists(self):
        html = format_analysis("- a\n\n* b")
        self.assertEqual(html.count("<ul>"), 2)

    def test_lowercase_numbered_lines_render_ordered_list(self):
        html = format_analysis("1. add metrics\n2. remove photo")
        self.assertEqual(html, "<ol><li>add metrics</li><li>remove photo</li></ol>")

    def test_plain_lines_become_paragraphs(self):
        self.assertEqual(format_analysis("first\nsecond"), "<p>first</p>\n<p>second</p>")


class InlineRenderingTests(unittest.TestCase):
    def test_bold_italic_and_code(self):
        rendered = render_inline("**Python** and *Go* with `pip install`")
        self.assertEqual(rendered, "<strong>Python</strong> and <em>Go</em> with <code>pip install</code>")

    def test_code_spans_are_not_restyled(self):
        self.assertEqual(render_inline("`**raw**`"), "<code>**raw**</code>")

    def test_arithmetic_asterisks_are_left_alone(self):
        self.assertEqual(render_inline("5 * 3 * 2"), "5 * 3 * 2")


if __name__ == "__main__":
    unittest.main()
