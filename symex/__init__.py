"""
The idea is: we navigate a tree of symbolic expressions (symexes) without ever building that tree. Where the tree is
"is" is left to an oracle that knows how to skip over one expression in the text; we only ever move a cursor.

We apply the same pattern as elsewhere:

* a structure (here: the cursor over the text, as exposed by an oracle; see `s_expr`)
* a Clef (the vocabulary of traversals that operate on that structure; see `traversal.clef`)
* construct/execute functions that combine the two (see `traversal.construct`).
"""
