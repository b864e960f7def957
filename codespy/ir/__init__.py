"""Types, values, instructions, blocks, functions, Java classes, dominance and dumping for the IR."""