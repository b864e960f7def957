"""In-place passes that prune exception edges, simplify the CFG and promote locals."""