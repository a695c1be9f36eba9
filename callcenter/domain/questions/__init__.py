"""Questions domain - topic tree, boards, forms and images"""
